"""Domain models for authenticated sessions."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_ROLE = 0


@dataclass(frozen=True)
class UserAttributes:
    """Profile attributes stored alongside the identity."""

    name: str = ""
    first_last_name: str = ""
    second_last_name: str = ""
    phone: str = ""
    role: int = DEFAULT_ROLE
    is_institutional_email: bool = False
    biometric_enabled: bool = False

    def full_name(self) -> str | None:
        """Return the non-blank name parts joined by spaces."""
        parts = [
            part.strip()
            for part in (self.name, self.first_last_name, self.second_last_name)
            if part and part.strip()
        ]
        return " ".join(parts) or None


@dataclass(frozen=True)
class SessionUser:
    """Represents the identity behind the current session."""

    id: str
    email: str | None
    phone: str | None
    attributes: UserAttributes


class SessionStatus(Enum):
    """Lifecycle of the identity provider session."""

    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class SessionState:
    """Current session status with the signed-in user, if any."""

    status: SessionStatus
    user: SessionUser | None = None

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(SessionStatus.LOADING)

    @classmethod
    def authenticated(cls, user: SessionUser) -> "SessionState":
        return cls(SessionStatus.AUTHENTICATED, user)

    @classmethod
    def unauthenticated(cls) -> "SessionState":
        return cls(SessionStatus.UNAUTHENTICATED)
