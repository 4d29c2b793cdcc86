"""Supabase-backed user role repository."""

from dataclasses import dataclass

from supabase import Client

from legal_aid_client.services.users import UserRoleRepository


@dataclass
class SupabaseUserRepository(UserRoleRepository):
    """Supabase implementation for staff roles."""

    client: Client

    def get_role(self, user_id: str) -> int | None:
        """Return the stored role for a user, if present."""
        response = (
            self.client.table("users")
            .select("role")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        role = response.data[0].get("role")
        return int(role) if role is not None else None
