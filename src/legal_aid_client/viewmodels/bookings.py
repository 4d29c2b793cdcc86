"""State for the client's own bookings screen."""

import asyncio
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Protocol

from legal_aid_client.domain.bookings import (
    Booking,
    BookingDraft,
    NumberedBooking,
    is_booking_in_future,
    project_bookings,
)
from legal_aid_client.services.collections import (
    Mutation,
    RemoteCollection,
    UpdateStrategy,
)
from legal_aid_client.services.observable import Observable, combine
from legal_aid_client.services.scope import ScreenScope

_logger = logging.getLogger(__name__)


class BookingRepository(Protocol):
    """Persistence interface for bookings."""

    def list_bookings(self) -> list[Booking]:
        """Return every booking visible to the session."""

    def create_booking(self, draft: BookingDraft) -> Booking:
        """Insert a booking and return the stored row."""

    def update_booking_status(self, booking_id: int, active: bool) -> Booking | None:
        """Set a booking's active flag and return the stored row."""


@dataclass
class BookingsViewModel:
    """Owns the raw bookings and the user's numbered, most-recent-first view."""

    repository: BookingRepository
    user_id: Observable[str | None]
    scope: ScreenScope = field(default_factory=lambda: ScreenScope("bookings"))

    def __post_init__(self) -> None:
        self.bookings: RemoteCollection[Booking] = RemoteCollection(
            name="bookings",
            scope=self.scope,
            fetch=self.repository.list_bookings,
            key=lambda booking: booking.id,
        )
        self.numbered_bookings: Observable[list[NumberedBooking]] = combine(
            self.bookings.items, self.user_id, project_bookings
        )
        self.is_loading: Observable[bool] = Observable(True)
        self.show_help_form: Observable[bool] = Observable(True)

    def start(self) -> asyncio.Task[None]:
        """Kick off the initial load."""
        return self.scope.launch(self.load_all_data())

    async def load_all_data(self) -> None:
        self.is_loading.set(True)
        try:
            await self.bookings.load()
        finally:
            self.is_loading.set(False)

    async def add_booking(self, draft: BookingDraft) -> Booking | None:
        """Insert a booking and append the stored row locally."""
        return await self.bookings.apply(
            Mutation(
                description="add booking",
                write=partial(self.repository.create_booking, draft),
                strategy=UpdateStrategy.PATCH,
            )
        )

    async def update_booking_status(
        self, booking_id: int, active: bool
    ) -> Booking | None:
        """Change a booking's active flag and patch the local row."""
        return await self.bookings.apply(
            Mutation(
                description=f"update booking {booking_id} status",
                write=partial(
                    self.repository.update_booking_status, booking_id, active
                ),
                strategy=UpdateStrategy.PATCH,
            )
        )

    def on_enter_help_view(self) -> bool:
        """Offer the help request form only when no upcoming booking exists."""
        current_user = self.user_id.value
        upcoming = [
            numbered.booking.id
            for numbered in self.numbered_bookings.value
            if numbered.booking.user_id == current_user
            and is_booking_in_future(numbered.booking.date, numbered.booking.time)
        ]
        _logger.debug(
            "Help view: user=%s upcoming_bookings=%s", current_user, upcoming
        )
        self.show_help_form.set(not upcoming)
        return self.show_help_form.value
