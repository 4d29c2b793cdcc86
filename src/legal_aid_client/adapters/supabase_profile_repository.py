"""Supabase repository for profile rows."""

from dataclasses import dataclass

from supabase import Client

from legal_aid_client.domain.profiles import Profile
from legal_aid_client.viewmodels.profile import ProfileRepository

TABLE = "profile"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profiles."""

    client: Client

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the stored profile for a user, if present."""
        response = (
            self.client.table(TABLE)
            .select("user_id, url_image, desc")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Profile(
            user_id=str(row.get("user_id") or user_id),
            image_url=str(row.get("url_image") or ""),
            description=str(row.get("desc") or ""),
        )

    def update_image_url(self, user_id: str, image_url: str) -> None:
        """Store a new profile image URL."""
        self.client.table(TABLE).update({"url_image": image_url}).eq(
            "user_id", user_id
        ).execute()

    def update_description(self, user_id: str, description: str) -> None:
        """Store a new profile description."""
        self.client.table(TABLE).update({"desc": description}).eq(
            "user_id", user_id
        ).execute()
