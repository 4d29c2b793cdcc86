"""Pydantic models for identity provider user metadata."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from legal_aid_client.domain.models import DEFAULT_ROLE, UserAttributes


class UserMetadataPayload(BaseModel):
    """User metadata stored by the identity provider."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = ""
    first_last_name: str = ""
    second_last_name: str = ""
    phone: str = ""
    role: int = DEFAULT_ROLE
    is_institutional_email: bool = Field(default=False, alias="is_tec_email")
    biometric_enabled: bool = False

    @field_validator(
        "name", "first_last_name", "second_last_name", "phone", mode="before"
    )
    @classmethod
    def _blank_when_missing(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip().replace('"', "")
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _default_role_when_missing(cls, value: object) -> object:
        return DEFAULT_ROLE if value is None else value

    @classmethod
    def from_attributes(cls, attributes: UserAttributes) -> "UserMetadataPayload":
        return cls(
            name=attributes.name,
            first_last_name=attributes.first_last_name,
            second_last_name=attributes.second_last_name,
            phone=attributes.phone,
            role=attributes.role,
            is_institutional_email=attributes.is_institutional_email,
            biometric_enabled=attributes.biometric_enabled,
        )

    def to_attributes(self) -> UserAttributes:
        return UserAttributes(
            name=self.name,
            first_last_name=self.first_last_name,
            second_last_name=self.second_last_name,
            phone=self.phone,
            role=self.role,
            is_institutional_email=self.is_institutional_email,
            biometric_enabled=self.biometric_enabled,
        )

    def to_metadata(self) -> dict[str, object]:
        """Return the metadata dict in the provider's key names."""
        return self.model_dump(by_alias=True)
