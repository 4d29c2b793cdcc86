"""Supabase-backed identity provider gateway."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from supabase import Client

from legal_aid_client.adapters.auth_models import UserMetadataPayload
from legal_aid_client.domain.errors import RemoteCallError
from legal_aid_client.domain.models import SessionUser, UserAttributes
from legal_aid_client.services.users import AuthGateway, SessionListener

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Supabase Auth implementation of the identity provider."""

    client: Client

    def sign_in(self, email: str, password: str) -> SessionUser:
        """Authenticate with email and password."""
        response = self.client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        if response.user is None:
            raise RemoteCallError("Sign-in returned no user")
        return _parse_user(response.user)

    def sign_up(
        self, email: str, password: str, attributes: UserAttributes
    ) -> SessionUser | None:
        """Register a new identity with its metadata."""
        response = self.client.auth.sign_up(
            {
                "email": email,
                "password": password,
                "options": {
                    "data": UserMetadataPayload.from_attributes(
                        attributes
                    ).to_metadata()
                },
            }
        )
        if response.user is None or response.session is None:
            return None
        return _parse_user(response.user)

    def sign_out(self) -> None:
        """End the current session."""
        self.client.auth.sign_out()

    def current_user(self) -> SessionUser | None:
        """Return the user for the current session, if any."""
        response = self.client.auth.get_user()
        if response is None or response.user is None:
            return None
        return _parse_user(response.user)

    def update_attributes(self, attributes: UserAttributes) -> SessionUser:
        """Merge new attributes into the stored user metadata."""
        current = self.client.auth.get_user()
        user = current.user if current else None
        existing = dict(user.user_metadata or {}) if user is not None else {}
        metadata = {
            **existing,
            **UserMetadataPayload.from_attributes(attributes).to_metadata(),
        }
        response = self.client.auth.update_user({"data": metadata})
        if response.user is None:
            raise RemoteCallError("Failed to update user metadata")
        return _parse_user(response.user)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Forward auth state changes as session users."""

        def on_change(event: object, session: object) -> None:
            user = getattr(session, "user", None)
            _logger.info("Auth state changed: event=%s", event)
            listener(_parse_user(user) if user is not None else None)

        subscription = self.client.auth.on_auth_state_change(on_change)
        return subscription.unsubscribe


def _parse_user(user: Any) -> SessionUser:
    metadata = UserMetadataPayload.model_validate(user.user_metadata or {})
    return SessionUser(
        id=str(user.id),
        email=user.email,
        phone=user.phone or None,
        attributes=metadata.to_attributes(),
    )
