"""State for the staff appointments screen."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from functools import partial
from typing import Protocol

from legal_aid_client.domain.bookings import (
    Booking,
    RepresentationStatus,
    region_name,
    situation_name,
)
from legal_aid_client.domain.cases import Case, CaseDraft
from legal_aid_client.services.collections import (
    Mutation,
    RemoteCollection,
    UpdateStrategy,
)
from legal_aid_client.services.observable import Observable
from legal_aid_client.services.scope import ScreenScope

_logger = logging.getLogger(__name__)


class AppointmentRepository(Protocol):
    """Persistence interface for staff-side booking decisions."""

    def list_active_bookings(self) -> list[Booking]:
        """Return bookings that have not been cancelled."""

    def list_past_pending(self, before: date) -> list[Booking]:
        """Return bookings dated before ``before`` still awaiting a decision."""

    def set_representation_status(
        self, booking_id: int, status: RepresentationStatus
    ) -> Booking | None:
        """Store the staff decision for a booking."""

    def cancel_booking(self, booking_id: int, reason: str) -> Booking | None:
        """Deactivate a booking with a cancellation reason."""


class CaseRepository(Protocol):
    """Persistence interface for cases."""

    def create_case(self, draft: CaseDraft) -> Case:
        """Insert a case and return the stored row."""


@dataclass(frozen=True)
class Loading:
    """Appointments are being fetched."""


@dataclass(frozen=True)
class Loaded:
    """Appointments fetched successfully."""

    bookings: list[Booking]


@dataclass(frozen=True)
class Failed:
    """Fetching or changing appointments failed."""

    message: str


AppointmentsUiState = Loading | Loaded | Failed


@dataclass
class AppointmentsViewModel:
    """Active appointments, past undecided ones and the staff decisions."""

    repository: AppointmentRepository
    case_repository: CaseRepository
    scope: ScreenScope = field(default_factory=lambda: ScreenScope("appointments"))

    def __post_init__(self) -> None:
        self.active: RemoteCollection[Booking] = RemoteCollection(
            name="active appointments",
            scope=self.scope,
            fetch=self.repository.list_active_bookings,
            key=lambda booking: booking.id,
        )
        self.past_pending: RemoteCollection[Booking] = RemoteCollection(
            name="past pending appointments",
            scope=self.scope,
            fetch=self._fetch_past_pending,
            key=lambda booking: booking.id,
        )
        self.ui_state: Observable[AppointmentsUiState] = Observable(Loading())
        self.error_message: Observable[str | None] = Observable(None)
        # Cases already opened for bookings whose status write has not landed.
        self._opened_cases: dict[int, Case] = {}

    def start(self) -> asyncio.Task[None]:
        """Kick off the initial loads."""
        return self.scope.launch(self._load_everything())

    async def load_appointments(self) -> AppointmentsUiState:
        """Fetch active appointments and publish the resulting screen state."""
        self.ui_state.set(Loading())
        await self.active.load()
        return self._publish_active("Failed to load appointments")

    async def load_past_pending(self) -> list[Booking]:
        return await self.past_pending.load()

    async def represent(self, booking: Booking, lawyer: str) -> Case | None:
        """Open a case for the booking, then mark the booking as represented.

        If the case cannot be created the booking stays pending so it can be
        represented again later. If the status write fails the opened case is
        kept, and a retry only repeats the status write.
        """
        case = self._opened_cases.get(booking.id)
        if case is None:
            client_name = " ".join(
                part for part in (booking.name, booking.last_name) if part
            )
            draft = CaseDraft(lawyer_name=lawyer, client_name=client_name)
            try:
                case = await self.scope.run_remote(
                    self.case_repository.create_case, draft
                )
            except Exception as exc:
                _logger.exception("Failed to open case for booking %s", booking.id)
                self.error_message.set(f"Failed to open case: {exc}")
                return None
            self._opened_cases[booking.id] = case
        if not await self._decide(booking.id, RepresentationStatus.REPRESENTED):
            return None
        del self._opened_cases[booking.id]
        return case

    async def reject(self, booking_id: int) -> bool:
        return await self._decide(booking_id, RepresentationStatus.REJECTED)

    async def cancel(self, booking: Booking, reason: str) -> AppointmentsUiState:
        """Cancel an appointment with a reason and reload the active list."""
        await self.active.apply(
            Mutation(
                description=f"cancel booking {booking.id}",
                write=partial(self.repository.cancel_booking, booking.id, reason),
                strategy=UpdateStrategy.REFETCH,
            )
        )
        return self._publish_active("Failed to cancel appointment")

    def clear_error_message(self) -> None:
        self.error_message.set(None)

    @staticmethod
    def region_name(region_id: int | None) -> str:
        return region_name(region_id)

    @staticmethod
    def situation_name(situation_id: int | None) -> str:
        return situation_name(situation_id)

    async def _load_everything(self) -> None:
        await self.load_appointments()
        await self.load_past_pending()

    async def _decide(self, booking_id: int, status: RepresentationStatus) -> bool:
        """Store a decision and reload past pending bookings.

        Returns True once the decision is saved, even when the reload fails.
        """
        stored = await self.past_pending.apply(
            Mutation(
                description=f"mark booking {booking_id} {status.name.lower()}",
                write=partial(
                    self.repository.set_representation_status, booking_id, status
                ),
                strategy=UpdateStrategy.REFETCH,
            )
        )
        error = self.past_pending.last_error.value
        if stored is None:
            reason = error if error is not None else "booking not found"
            self.error_message.set(f"Failed to update appointment: {reason}")
            return False
        if error is not None:
            self.error_message.set(f"Failed to refresh appointments: {error}")
        return True

    def _fetch_past_pending(self) -> list[Booking]:
        return self.repository.list_past_pending(date.today())

    def _publish_active(self, failure_prefix: str) -> AppointmentsUiState:
        error = self.active.last_error.value
        if error is not None:
            state: AppointmentsUiState = Failed(f"{failure_prefix}: {error}")
        else:
            state = Loaded(list(self.active.items.value))
        self.ui_state.set(state)
        return state
