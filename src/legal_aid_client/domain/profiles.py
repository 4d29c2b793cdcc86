"""Domain models for user profiles."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Profile:
    """Profile row merged with identity details."""

    user_id: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    image_url: str = ""
    description: str = ""


@dataclass(frozen=True)
class UpdateProfileResult:
    """Outcome of a profile update, shown once then reset."""

    success: bool
    message: str


class UploadState(Enum):
    """Stages of a profile image upload."""

    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ImageUploadStatus:
    """Upload stage with the resulting URL or error message."""

    state: UploadState = UploadState.IDLE
    image_url: str | None = None
    message: str | None = None
