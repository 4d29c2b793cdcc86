"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_HEADER_URL = (
    "https://cdlpmnjnonnruremcszc.supabase.co/storage/v1/object/public/"
    "postImage/post_images/martillito.png"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    institutional_email_domain: str = "@tec.mx"
    post_image_bucket: str = "postImage"
    profile_image_bucket: str = "profile_pictures"
    default_header_url: str = DEFAULT_HEADER_URL
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def is_institutional_email(email: str, domain: str) -> bool:
    """Return True when the email belongs to the institutional domain."""
    cleaned = email.strip().lower()
    suffix = domain.strip().lower()
    if not suffix:
        return False
    if not suffix.startswith("@"):
        suffix = f"@{suffix}"
    return cleaned.endswith(suffix)
