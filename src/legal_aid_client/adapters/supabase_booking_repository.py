"""Supabase repository for appointment bookings."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from legal_aid_client.domain.bookings import (
    DATE_FORMAT,
    Booking,
    BookingDraft,
    RepresentationStatus,
)
from legal_aid_client.domain.errors import RemoteCallError, RowDecodeError
from legal_aid_client.viewmodels.appointments import AppointmentRepository
from legal_aid_client.viewmodels.bookings import BookingRepository

TABLE = "Citas"


@dataclass
class SupabaseBookingRepository(BookingRepository, AppointmentRepository):
    """Supabase implementation for bookings, for clients and staff alike."""

    client: Client

    def list_bookings(self) -> list[Booking]:
        """Return every booking visible to the session."""
        response = self.client.table(TABLE).select("*").execute()
        return [_parse_booking(row) for row in response.data or []]

    def create_booking(self, draft: BookingDraft) -> Booking:
        """Insert a booking row and return it."""
        response = (
            self.client.table(TABLE)
            .insert(
                {
                    "nombre": draft.name,
                    "apellido": draft.last_name,
                    "fecha": draft.date,
                    "hora": draft.time,
                    "id_region": draft.region_id,
                    "estado_cita": draft.active,
                    "id_situacion": draft.situation_id,
                    "id_usuario": draft.user_id,
                }
            )
            .execute()
        )
        if not response.data:
            raise RemoteCallError("Failed to create booking")
        return _parse_booking(response.data[0])

    def update_booking_status(self, booking_id: int, active: bool) -> Booking | None:
        """Set the active flag of a booking."""
        response = (
            self.client.table(TABLE)
            .update({"estado_cita": active})
            .eq("id", booking_id)
            .execute()
        )
        return _first_booking(response.data)

    def list_active_bookings(self) -> list[Booking]:
        """Return bookings that have not been cancelled."""
        response = (
            self.client.table(TABLE).select("*").eq("estado_cita", True).execute()
        )
        return [_parse_booking(row) for row in response.data or []]

    def list_past_pending(self, before: date) -> list[Booking]:
        """Return bookings dated before ``before`` with no staff decision."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .lt("fecha", before.strftime(DATE_FORMAT))
            .eq("estado_representacion", int(RepresentationStatus.PENDING))
            .execute()
        )
        return [_parse_booking(row) for row in response.data or []]

    def set_representation_status(
        self, booking_id: int, status: RepresentationStatus
    ) -> Booking | None:
        """Store the staff decision for a booking."""
        response = (
            self.client.table(TABLE)
            .update({"estado_representacion": int(status)})
            .eq("id", booking_id)
            .execute()
        )
        return _first_booking(response.data)

    def cancel_booking(self, booking_id: int, reason: str) -> Booking | None:
        """Deactivate a booking and record why."""
        response = (
            self.client.table(TABLE)
            .update({"estado_cita": False, "motivo_cancelacion": reason})
            .eq("id", booking_id)
            .execute()
        )
        return _first_booking(response.data)


def _first_booking(rows: list[dict[str, object]] | None) -> Booking | None:
    if not rows:
        return None
    return _parse_booking(rows[0])


def _parse_booking(row: dict[str, object]) -> Booking:
    try:
        status = row.get("estado_representacion")
        return Booking(
            id=int(row["id"]),
            name=str(row.get("nombre") or ""),
            last_name=str(row.get("apellido") or ""),
            date=str(row.get("fecha") or ""),
            time=str(row.get("hora") or ""),
            region_id=_optional_int(row.get("id_region")),
            active=bool(row.get("estado_cita")),
            situation_id=_optional_int(row.get("id_situacion")),
            user_id=str(row["id_usuario"]) if row.get("id_usuario") else None,
            cancellation_reason=row.get("motivo_cancelacion"),
            representation_status=RepresentationStatus(
                int(status) if status is not None else RepresentationStatus.PENDING
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RowDecodeError(TABLE, row, str(exc)) from exc


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)
