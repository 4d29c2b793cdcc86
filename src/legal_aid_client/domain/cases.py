"""Domain models for legal cases opened from bookings."""

from dataclasses import dataclass

PLACEHOLDER = "Sin información"
DEFAULT_DRIVE_URL = "https://drive.google.com"
OPEN_STATUS = 1


@dataclass(frozen=True)
class CaseDraft:
    """Case fields written when a booking is accepted for representation."""

    lawyer_name: str
    client_name: str
    nuc: str = PLACEHOLDER
    judicial_file: str = PLACEHOLDER
    investigation_file: str = PLACEHOLDER
    prosecutor_portal_access: str = PLACEHOLDER
    prosecutor_portal_password: str = PLACEHOLDER
    lead_prosecutor: str = PLACEHOLDER
    investigation_unit_id: int | None = None
    drive_url: str = DEFAULT_DRIVE_URL
    status: int = OPEN_STATUS


@dataclass(frozen=True)
class Case:
    """Represents a case row."""

    id: int
    lawyer_name: str
    client_name: str
    nuc: str
    judicial_file: str
    investigation_file: str
    prosecutor_portal_access: str
    prosecutor_portal_password: str
    lead_prosecutor: str
    investigation_unit_id: int | None
    drive_url: str
    status: int
