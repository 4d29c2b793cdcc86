"""Supabase Storage implementation of the blob store."""

from dataclasses import dataclass

from supabase import Client

from legal_aid_client.services.media import BlobStore


@dataclass
class SupabaseBlobStore(BlobStore):
    """Stores objects in Supabase Storage buckets."""

    client: Client
    content_type: str = "image/jpeg"

    def upload(self, bucket: str, path: str, data: bytes) -> None:
        """Upload bytes to a bucket path."""
        self.client.storage.from_(bucket).upload(
            path, data, {"content-type": self.content_type}
        )

    def public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of an object."""
        return self.client.storage.from_(bucket).get_public_url(path)

    def delete(self, bucket: str, path: str) -> None:
        """Remove an object."""
        self.client.storage.from_(bucket).remove([path])
