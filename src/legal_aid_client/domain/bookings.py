"""Domain models and derived views for appointment bookings."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

_logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
# Postgres ``time`` columns come back with seconds.
DATE_TIME_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")
UNKNOWN_LABEL = "Desconocido"

REGIONS: dict[int, str] = {
    1: "Apodaca",
    2: "Escobedo",
    3: "Guadalupe",
    4: "Monterrey",
    5: "San Nicolás de los Garza",
    6: "San Pedro Garza García",
    7: "Otro",
}

SITUATIONS: dict[int, str] = {
    1: "Víctima",
    2: "Investigado",
}


class RepresentationStatus(IntEnum):
    """Staff decision on a booking."""

    PENDING = 0
    REPRESENTED = 1
    REJECTED = 2


@dataclass(frozen=True)
class BookingDraft:
    """Booking fields supplied by the user before the row exists."""

    name: str
    last_name: str
    date: str
    time: str
    region_id: int
    situation_id: int
    user_id: str
    active: bool = True


@dataclass(frozen=True)
class Booking:
    """Represents an appointment booking row."""

    id: int
    name: str
    last_name: str
    date: str
    time: str
    region_id: int | None
    active: bool
    situation_id: int | None
    user_id: str | None
    cancellation_reason: str | None = None
    representation_status: RepresentationStatus = RepresentationStatus.PENDING

    @property
    def region_name(self) -> str:
        return region_name(self.region_id)

    @property
    def situation_name(self) -> str:
        return situation_name(self.situation_id)


@dataclass(frozen=True)
class NumberedBooking:
    """A booking with its rank inside the user's projected list."""

    booking: Booking
    ordinal: int


def region_name(region_id: int | None) -> str:
    """Return the display name for a region id."""
    if region_id is None:
        return UNKNOWN_LABEL
    return REGIONS.get(region_id, UNKNOWN_LABEL)


def situation_name(situation_id: int | None) -> str:
    """Return the display name for a situation id."""
    if situation_id is None:
        return UNKNOWN_LABEL
    return SITUATIONS.get(situation_id, UNKNOWN_LABEL)


def parse_booking_date(value: str | None, fallback: datetime) -> datetime:
    """Parse a booking date, returning ``fallback`` when it is unparseable.

    The fallback loses the real position of the row in the ordering; callers
    pass the instant the projection is computed so such rows sort as "now".
    """
    if not value:
        return fallback
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        _logger.debug("Unparseable booking date %r, sorting as %s", value, fallback)
        return fallback


def project_bookings(
    bookings: Iterable[Booking],
    user_id: str | None,
    now: datetime | None = None,
) -> list[NumberedBooking]:
    """Return the user's bookings, most recent first, numbered N..1.

    Rows are filtered by owner, sorted by date descending with a stable sort
    (equal dates keep fetch order) and numbered so that the most recent row
    carries the number of filtered rows.
    """
    if user_id is None:
        return []
    reference = now or datetime.now()
    owned = [booking for booking in bookings if booking.user_id == user_id]
    ordered = sorted(
        owned,
        key=lambda booking: parse_booking_date(booking.date, reference),
        reverse=True,
    )
    total = len(ordered)
    return [
        NumberedBooking(booking=booking, ordinal=total - index)
        for index, booking in enumerate(ordered)
    ]


def is_booking_in_future(
    date_value: str | None, time_value: str | None, now: datetime | None = None
) -> bool:
    """Return True when the booking's date and time are after now.

    Date and time are read as local wall-clock time. Anything that does not
    parse is treated as not in the future.
    """
    if not date_value or not time_value:
        return False
    combined = f"{date_value.strip()} {time_value.strip()}"
    for pattern in DATE_TIME_FORMATS:
        try:
            scheduled = datetime.strptime(combined, pattern)
        except ValueError:
            continue
        return scheduled > (now or datetime.now())
    return False
