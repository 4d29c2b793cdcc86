"""Session and identity lifecycle."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Protocol

from legal_aid_client.config import is_institutional_email
from legal_aid_client.domain.errors import AuthenticationError
from legal_aid_client.domain.models import (
    DEFAULT_ROLE,
    SessionState,
    SessionUser,
    UserAttributes,
)
from legal_aid_client.services.observable import Observable
from legal_aid_client.services.scope import ScreenScope

_logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionUser | None], None]


class AuthGateway(Protocol):
    """Interface for the hosted identity provider."""

    def sign_in(self, email: str, password: str) -> SessionUser:
        """Authenticate with email and password."""

    def sign_up(
        self, email: str, password: str, attributes: UserAttributes
    ) -> SessionUser | None:
        """Register a new identity; None when confirmation is pending."""

    def sign_out(self) -> None:
        """End the current session."""

    def current_user(self) -> SessionUser | None:
        """Return the user behind the current session, if any."""

    def update_attributes(self, attributes: UserAttributes) -> SessionUser:
        """Persist new attributes for the current user."""

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` on every session change; returns an unsubscriber."""


class UserRoleRepository(Protocol):
    """Persistence interface for staff roles."""

    def get_role(self, user_id: str) -> int | None:
        """Return the stored role for a user, if present."""


@dataclass
class SessionService:
    """Read-only, live view of the session plus the account actions."""

    gateway: AuthGateway
    role_repository: UserRoleRepository
    scope: ScreenScope
    institutional_email_domain: str = "@tec.mx"
    session_state: Observable[SessionState] = field(
        default_factory=lambda: Observable(SessionState.loading())
    )
    user_id: Observable[str | None] = field(default_factory=lambda: Observable(None))
    _unsubscribe: Callable[[], None] | None = field(default=None, repr=False)

    async def start(self) -> SessionUser | None:
        """Follow provider session events and publish the current user."""
        if self._unsubscribe is None:
            self._unsubscribe = self.gateway.subscribe(self._on_session_event)
        return await self.refresh()

    def stop(self) -> None:
        """Stop following provider session events."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def refresh(self) -> SessionUser | None:
        """Reload the current user from the provider."""
        try:
            user = await self.scope.run_remote(self.gateway.current_user)
        except Exception:
            _logger.exception("Failed to read current session")
            user = None
        self._publish(user)
        return user

    async def sign_in(self, email: str, password: str) -> SessionUser:
        """Sign in and publish the authenticated session."""
        try:
            user = await self.scope.run_remote(self.gateway.sign_in, email, password)
        except Exception as exc:
            raise AuthenticationError(f"Sign-in failed: {exc}") from exc
        self._publish(user)
        return user

    async def sign_up(  # noqa: PLR0913
        self,
        email: str,
        password: str,
        name: str,
        first_last_name: str,
        second_last_name: str,
        phone: str,
    ) -> SessionUser | None:
        """Register a client account with default role and biometrics off."""
        attributes = UserAttributes(
            name=name,
            first_last_name=first_last_name,
            second_last_name=second_last_name,
            phone=phone,
            role=DEFAULT_ROLE,
            is_institutional_email=is_institutional_email(
                email, self.institutional_email_domain
            ),
            biometric_enabled=False,
        )
        try:
            user = await self.scope.run_remote(
                self.gateway.sign_up, email, password, attributes
            )
        except Exception as exc:
            raise AuthenticationError(f"Sign-up failed: {exc}") from exc
        if user is not None:
            self._publish(user)
        return user

    async def sign_out(self) -> None:
        """Sign out and publish the unauthenticated session."""
        try:
            await self.scope.run_remote(self.gateway.sign_out)
        except Exception as exc:
            raise AuthenticationError(f"Sign-out failed: {exc}") from exc
        self._publish(None)

    async def get_user_id(self) -> str:
        """Return the current user id or raise AuthenticationError."""
        return (await self._require_user("user id")).id

    async def get_user_name(self) -> str | None:
        """Return the user's full name, or None when unknown."""
        try:
            user = await self.scope.run_remote(self.gateway.current_user)
        except Exception:
            _logger.exception("Failed to read user name")
            return None
        if user is None:
            return None
        return user.attributes.full_name()

    async def get_user_email(self) -> str | None:
        user = await self._current_or_none("email")
        return user.email if user else None

    async def get_user_phone(self) -> str | None:
        user = await self._current_or_none("phone")
        if user is None:
            return None
        return user.attributes.phone or user.phone

    async def get_user_role(self) -> int:
        """Return the staff role of the current user, defaulting to clients."""
        try:
            user = await self._require_user("role")
            role = await self.scope.run_remote(self.role_repository.get_role, user.id)
        except Exception:
            _logger.exception("Failed to read user role")
            return DEFAULT_ROLE
        return DEFAULT_ROLE if role is None else role

    async def is_institutional_email(self) -> bool:
        user = await self._require_user("institutional email flag")
        return user.attributes.is_institutional_email

    async def is_biometric_enabled(self) -> bool:
        user = await self._require_user("biometric setting")
        return user.attributes.biometric_enabled

    async def update_biometric_setting(self, enabled: bool) -> None:
        """Store the biometric sign-in preference in the user attributes."""
        user = await self._require_user("biometric setting")
        attributes = replace(user.attributes, biometric_enabled=enabled)
        try:
            updated = await self.scope.run_remote(
                self.gateway.update_attributes, attributes
            )
        except Exception as exc:
            raise AuthenticationError(
                f"Failed to update biometric setting: {exc}"
            ) from exc
        self._publish(updated)

    async def _require_user(self, purpose: str) -> SessionUser:
        try:
            user = await self.scope.run_remote(self.gateway.current_user)
        except Exception as exc:
            raise AuthenticationError(f"Failed to read {purpose}: {exc}") from exc
        if user is None:
            raise AuthenticationError(f"Failed to read {purpose}: not signed in")
        return user

    async def _current_or_none(self, purpose: str) -> SessionUser | None:
        try:
            return await self.scope.run_remote(self.gateway.current_user)
        except Exception:
            _logger.exception("Failed to read user %s", purpose)
            return None

    def _on_session_event(self, user: SessionUser | None) -> None:
        self.scope.post(self._publish, user)

    def _publish(self, user: SessionUser | None) -> None:
        if user is None:
            self.session_state.set(SessionState.unauthenticated())
            self.user_id.set(None)
        else:
            self.session_state.set(SessionState.authenticated(user))
            self.user_id.set(user.id)
