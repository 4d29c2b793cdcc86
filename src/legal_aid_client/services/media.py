"""Image uploads to the blob store."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import unquote, urlparse
from uuid import uuid4

_logger = logging.getLogger(__name__)

_PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"


class BlobStore(Protocol):
    """Interface for object storage buckets."""

    def upload(self, bucket: str, path: str, data: bytes) -> None:
        """Store bytes under a path in a bucket."""

    def public_url(self, bucket: str, path: str) -> str:
        """Return the public URL of an object."""

    def delete(self, bucket: str, path: str) -> None:
        """Remove an object from a bucket."""


@dataclass(frozen=True)
class StoredImage:
    """An uploaded image and its public URL."""

    bucket: str
    path: str
    url: str


@dataclass
class MediaService:
    """Uploads images under random names and removes them by URL."""

    store: BlobStore

    def upload_image(self, bucket: str, folder: str, data: bytes) -> StoredImage:
        """Upload JPEG bytes under ``folder`` and return where they landed."""
        path = f"{folder.strip('/')}/{uuid4()}.jpg"
        self.store.upload(bucket, path, data)
        url = self.store.public_url(bucket, path)
        _logger.info("Uploaded image: bucket=%s path=%s", bucket, path)
        return StoredImage(bucket=bucket, path=path, url=url)

    def delete(self, bucket: str, path: str) -> None:
        """Remove an object by its path."""
        self.store.delete(bucket, path)

    def delete_by_url(self, bucket: str, url: str) -> bool:
        """Remove the object behind a public URL; False when no path is found."""
        path = object_path_from_url(bucket, url)
        if path is None:
            _logger.error("Unable to extract object path from URL: %s", url)
            return False
        self.store.delete(bucket, path)
        _logger.info("Deleted image: bucket=%s path=%s", bucket, path)
        return True


def object_path_from_url(bucket: str, url: str) -> str | None:
    """Return the object path inside ``bucket`` for a public URL."""
    path = unquote(urlparse(url).path)
    marker = f"{_PUBLIC_OBJECT_PREFIX}{bucket}/"
    if marker in path:
        object_path = path.split(marker, 1)[1]
        return object_path or None
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    return segment or None
