"""State for the user's profile screen."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Protocol

from legal_aid_client.domain.profiles import (
    ImageUploadStatus,
    Profile,
    UpdateProfileResult,
    UploadState,
)
from legal_aid_client.services.media import MediaService, StoredImage
from legal_aid_client.services.observable import Observable
from legal_aid_client.services.scope import ScreenScope
from legal_aid_client.services.users import SessionService

_logger = logging.getLogger(__name__)

PROFILE_IMAGE_FOLDER = "profile_pictures"


class ProfileRepository(Protocol):
    """Persistence interface for profile rows."""

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the stored profile for a user, if present."""

    def update_image_url(self, user_id: str, image_url: str) -> None:
        """Store a new profile image URL."""

    def update_description(self, user_id: str, description: str) -> None:
        """Store a new profile description."""


@dataclass
class ProfileViewModel:
    """Profile details with a staged image that is only kept once saved."""

    repository: ProfileRepository
    session: SessionService
    media: MediaService
    image_bucket: str
    scope: ScreenScope = field(default_factory=lambda: ScreenScope("profile"))

    def __post_init__(self) -> None:
        self.profile: Observable[Profile] = Observable(Profile())
        self.is_loading: Observable[bool] = Observable(False)
        self.update_result: Observable[UpdateProfileResult | None] = Observable(None)
        self.error_message: Observable[str | None] = Observable(None)
        self.image_upload_status: Observable[ImageUploadStatus] = Observable(
            ImageUploadStatus()
        )
        self._staged_image: StoredImage | None = None

    def start(self) -> asyncio.Task[None]:
        """Kick off the initial load."""
        return self.scope.launch(self.load_profile())

    async def load_profile(self) -> None:
        """Load the profile row and merge in name, email and phone."""
        self.is_loading.set(True)
        try:
            user_id = await self.session.get_user_id()
            stored = await self.scope.run_remote(self.repository.get_profile, user_id)
            name = await self.session.get_user_name()
            email = await self.session.get_user_email()
            phone = await self.session.get_user_phone()
            self.profile.set(
                replace(
                    stored or Profile(user_id=user_id),
                    name=name or "",
                    email=email or "",
                    phone=phone or "",
                )
            )
            self.error_message.set(None)
        except Exception as exc:
            _logger.exception("Failed to load profile")
            self.error_message.set(f"Failed to load profile: {exc}")
        finally:
            self.is_loading.set(False)

    async def upload_profile_image(self, image: bytes) -> None:
        """Upload a new image and show it before it is saved."""
        self.image_upload_status.set(ImageUploadStatus(UploadState.UPLOADING))
        try:
            stored = await self.scope.run_remote(
                self.media.upload_image,
                self.image_bucket,
                PROFILE_IMAGE_FOLDER,
                image,
            )
        except Exception as exc:
            _logger.exception("Failed to upload profile image")
            self.image_upload_status.set(
                ImageUploadStatus(
                    UploadState.ERROR, message=f"Failed to upload image: {exc}"
                )
            )
            return
        self._staged_image = stored
        self.profile.update(lambda current: replace(current, image_url=stored.url))
        self.image_upload_status.set(
            ImageUploadStatus(UploadState.SUCCESS, image_url=stored.url)
        )

    async def update_profile(self, description: str) -> None:
        """Save the description and any staged image.

        On failure the staged image is removed from storage and the stored
        profile is reloaded.
        """
        self.is_loading.set(True)
        staged = self._staged_image
        try:
            user_id = await self.session.get_user_id()
            await self.scope.run_remote(
                self.repository.update_description, user_id, description
            )
            # Image URL goes last: after it lands the staged blob is never deleted.
            if staged is not None:
                await self.scope.run_remote(
                    self.repository.update_image_url, user_id, staged.url
                )
            self.profile.update(
                lambda current: replace(
                    current,
                    description=description,
                    image_url=staged.url if staged else current.image_url,
                )
            )
            self._staged_image = None
            self.update_result.set(
                UpdateProfileResult(success=True, message="Profile updated")
            )
            self.error_message.set(None)
        except Exception as exc:
            _logger.exception("Failed to update profile")
            message = f"Failed to update profile: {exc}"
            await self._discard_staged_image()
            await self.load_profile()
            self.update_result.set(UpdateProfileResult(success=False, message=message))
            self.error_message.set(message)
        finally:
            self.is_loading.set(False)

    async def cancel_changes(self) -> None:
        """Drop the staged image and reload the stored profile."""
        await self._discard_staged_image()
        await self.load_profile()

    def reset_update_result(self) -> None:
        self.update_result.set(None)
        self.error_message.set(None)

    def reset_image_upload_status(self) -> None:
        self.image_upload_status.set(ImageUploadStatus())

    async def _discard_staged_image(self) -> None:
        staged = self._staged_image
        self._staged_image = None
        if staged is None:
            return
        try:
            await self.scope.run_remote(self.media.delete, staged.bucket, staged.path)
        except Exception:
            _logger.exception("Failed to delete staged image %s", staged.path)
