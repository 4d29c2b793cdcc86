"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date

import pytest

from legal_aid_client.config import Settings
from legal_aid_client.domain.bookings import (
    Booking,
    BookingDraft,
    RepresentationStatus,
)
from legal_aid_client.domain.cases import Case, CaseDraft
from legal_aid_client.domain.content import (
    Category,
    ContentDraft,
    ContentItem,
    ContentPreview,
)
from legal_aid_client.domain.models import SessionUser, UserAttributes
from legal_aid_client.domain.profiles import Profile
from legal_aid_client.services.media import BlobStore, MediaService
from legal_aid_client.services.scope import ScreenScope
from legal_aid_client.services.users import (
    AuthGateway,
    SessionListener,
    SessionService,
    UserRoleRepository,
)
from legal_aid_client.viewmodels.appointments import (
    AppointmentRepository,
    CaseRepository,
)
from legal_aid_client.viewmodels.bookings import BookingRepository
from legal_aid_client.viewmodels.home import ContentRepository
from legal_aid_client.viewmodels.profile import ProfileRepository


class FakeBackendError(RuntimeError):
    """Raised by fakes to simulate a failed remote call."""


def _maybe_fail(failing: set[str], operation: str, message: str = "") -> None:
    if operation in failing:
        raise FakeBackendError(message or f"{operation} unavailable")


def make_booking(  # noqa: PLR0913
    booking_id: int,
    date_value: str = "2024-01-01",
    user_id: str | None = "u1",
    time_value: str = "10:00",
    active: bool = True,
    status: RepresentationStatus = RepresentationStatus.PENDING,
) -> Booking:
    return Booking(
        id=booking_id,
        name="Ana",
        last_name="Pérez",
        date=date_value,
        time=time_value,
        region_id=4,
        active=active,
        situation_id=1,
        user_id=user_id,
        representation_status=status,
    )


@dataclass
class InMemoryBookingRepository(BookingRepository, AppointmentRepository):
    """In-memory booking repository for tests."""

    rows: dict[int, Booking] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    fetch_count: int = 0
    next_id: int = 100

    def add(self, *bookings: Booking) -> None:
        for booking in bookings:
            self.rows[booking.id] = booking

    def list_bookings(self) -> list[Booking]:
        _maybe_fail(self.failing, "list_bookings")
        self.fetch_count += 1
        return list(self.rows.values())

    def create_booking(self, draft: BookingDraft) -> Booking:
        _maybe_fail(self.failing, "create_booking")
        self.next_id += 1
        booking = Booking(
            id=self.next_id,
            name=draft.name,
            last_name=draft.last_name,
            date=draft.date,
            time=draft.time,
            region_id=draft.region_id,
            active=draft.active,
            situation_id=draft.situation_id,
            user_id=draft.user_id,
        )
        self.rows[booking.id] = booking
        return booking

    def update_booking_status(self, booking_id: int, active: bool) -> Booking | None:
        _maybe_fail(self.failing, "update_booking_status")
        if booking_id not in self.rows:
            return None
        self.rows[booking_id] = replace(self.rows[booking_id], active=active)
        return self.rows[booking_id]

    def list_active_bookings(self) -> list[Booking]:
        _maybe_fail(self.failing, "list_active_bookings")
        self.fetch_count += 1
        return [booking for booking in self.rows.values() if booking.active]

    def list_past_pending(self, before: date) -> list[Booking]:
        _maybe_fail(self.failing, "list_past_pending")
        cutoff = before.isoformat()
        return [
            booking
            for booking in self.rows.values()
            if booking.date < cutoff
            and booking.representation_status is RepresentationStatus.PENDING
        ]

    def set_representation_status(
        self, booking_id: int, status: RepresentationStatus
    ) -> Booking | None:
        _maybe_fail(self.failing, "set_representation_status")
        if booking_id not in self.rows:
            return None
        self.rows[booking_id] = replace(
            self.rows[booking_id], representation_status=status
        )
        return self.rows[booking_id]

    def cancel_booking(self, booking_id: int, reason: str) -> Booking | None:
        _maybe_fail(self.failing, "cancel_booking")
        if booking_id not in self.rows:
            return None
        self.rows[booking_id] = replace(
            self.rows[booking_id], active=False, cancellation_reason=reason
        )
        return self.rows[booking_id]


@dataclass
class InMemoryCaseRepository(CaseRepository):
    """In-memory case repository for tests."""

    cases: list[Case] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)

    def create_case(self, draft: CaseDraft) -> Case:
        _maybe_fail(self.failing, "create_case")
        case = Case(
            id=len(self.cases) + 1,
            lawyer_name=draft.lawyer_name,
            client_name=draft.client_name,
            nuc=draft.nuc,
            judicial_file=draft.judicial_file,
            investigation_file=draft.investigation_file,
            prosecutor_portal_access=draft.prosecutor_portal_access,
            prosecutor_portal_password=draft.prosecutor_portal_password,
            lead_prosecutor=draft.lead_prosecutor,
            investigation_unit_id=draft.investigation_unit_id,
            drive_url=draft.drive_url,
            status=draft.status,
        )
        self.cases.append(case)
        return case


@dataclass
class InMemoryContentRepository(ContentRepository):
    """In-memory content repository for tests."""

    categories: dict[int, Category] = field(default_factory=dict)
    items: dict[int, ContentItem] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    failure_errors: dict[str, Exception] = field(default_factory=dict)

    def _check(self, operation: str) -> None:
        if operation in self.failing and operation in self.failure_errors:
            raise self.failure_errors[operation]
        _maybe_fail(self.failing, operation)

    def list_categories(self) -> list[Category]:
        self._check("list_categories")
        return list(self.categories.values())

    def create_category(self, name: str) -> Category | None:
        self._check("create_category")
        category = Category(id=max(self.categories, default=0) + 1, name=name)
        self.categories[category.id] = category
        return category

    def update_category(self, category_id: int, name: str) -> Category | None:
        self._check("update_category")
        self.categories[category_id] = Category(id=category_id, name=name)
        return self.categories[category_id]

    def delete_category(self, category_id: int) -> None:
        self._check("delete_category")
        self.categories.pop(category_id, None)

    def list_content_previews(self) -> list[ContentPreview]:
        self._check("list_content_previews")
        return [
            ContentPreview(
                id=item.id,
                category_id=item.category_id,
                created_at=item.created_at,
                title=item.title,
                header_url=item.header_url,
            )
            for item in self.items.values()
        ]

    def get_content_item(self, content_id: int) -> ContentItem | None:
        self._check("get_content_item")
        return self.items.get(content_id)

    def create_content(self, draft: ContentDraft) -> ContentItem | None:
        self._check("create_content")
        item = ContentItem(
            id=max(self.items, default=0) + 1,
            category_id=draft.category_id,
            created_at="2024-05-01T10:00:00+00:00",
            title=draft.title,
            header_url=draft.header_url,
            text=draft.text,
        )
        self.items[item.id] = item
        return item

    def update_content(
        self, content_id: int, draft: ContentDraft
    ) -> ContentItem | None:
        self._check("update_content")
        current = self.items[content_id]
        self.items[content_id] = replace(
            current,
            category_id=draft.category_id,
            title=draft.title,
            header_url=draft.header_url,
            text=draft.text,
        )
        return self.items[content_id]

    def delete_content(self, content_id: int) -> None:
        self._check("delete_content")
        self.items.pop(content_id, None)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, Profile] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)

    def get_profile(self, user_id: str) -> Profile | None:
        _maybe_fail(self.failing, "get_profile")
        return self.profiles.get(user_id)

    def update_image_url(self, user_id: str, image_url: str) -> None:
        _maybe_fail(self.failing, "update_image_url")
        current = self.profiles.get(user_id, Profile(user_id=user_id))
        self.profiles[user_id] = replace(current, image_url=image_url)

    def update_description(self, user_id: str, description: str) -> None:
        _maybe_fail(self.failing, "update_description")
        current = self.profiles.get(user_id, Profile(user_id=user_id))
        self.profiles[user_id] = replace(current, description=description)


@dataclass
class InMemoryBlobStore(BlobStore):
    """In-memory blob store for tests."""

    objects: dict[tuple[str, str], bytes] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    base_url: str = "https://example.supabase.co/storage/v1/object/public"

    def upload(self, bucket: str, path: str, data: bytes) -> None:
        _maybe_fail(self.failing, "upload")
        self.objects[(bucket, path)] = data

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/{bucket}/{path}"

    def delete(self, bucket: str, path: str) -> None:
        _maybe_fail(self.failing, "delete")
        self.objects.pop((bucket, path), None)


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake identity provider keeping accounts in memory."""

    accounts: dict[str, tuple[str, SessionUser]] = field(default_factory=dict)
    user: SessionUser | None = None
    failing: set[str] = field(default_factory=set)
    listeners: list[SessionListener] = field(default_factory=list)
    signed_up: list[tuple[str, UserAttributes]] = field(default_factory=list)

    def register(self, email: str, password: str, user: SessionUser) -> None:
        self.accounts[email] = (password, user)

    def sign_in(self, email: str, password: str) -> SessionUser:
        _maybe_fail(self.failing, "sign_in")
        stored = self.accounts.get(email)
        if stored is None or stored[0] != password:
            raise FakeBackendError("Invalid login credentials")
        self.user = stored[1]
        self._emit()
        return self.user

    def sign_up(
        self, email: str, password: str, attributes: UserAttributes
    ) -> SessionUser | None:
        _maybe_fail(self.failing, "sign_up")
        self.signed_up.append((email, attributes))
        user = SessionUser(
            id=f"user-{len(self.accounts) + 1}",
            email=email,
            phone=None,
            attributes=attributes,
        )
        self.accounts[email] = (password, user)
        self.user = user
        self._emit()
        return user

    def sign_out(self) -> None:
        _maybe_fail(self.failing, "sign_out")
        self.user = None
        self._emit()

    def current_user(self) -> SessionUser | None:
        _maybe_fail(self.failing, "current_user")
        return self.user

    def update_attributes(self, attributes: UserAttributes) -> SessionUser:
        _maybe_fail(self.failing, "update_attributes")
        if self.user is None:
            raise FakeBackendError("not signed in")
        self.user = replace(self.user, attributes=attributes)
        return self.user

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self.listeners.append(listener)
        return lambda: self.listeners.remove(listener)

    def _emit(self) -> None:
        for listener in list(self.listeners):
            listener(self.user)


@dataclass
class InMemoryUserRoleRepository(UserRoleRepository):
    """In-memory role repository for tests."""

    roles: dict[str, int] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)

    def get_role(self, user_id: str) -> int | None:
        _maybe_fail(self.failing, "get_role")
        return self.roles.get(user_id)


def make_user(user_id: str = "u1", **attributes: object) -> SessionUser:
    return SessionUser(
        id=user_id,
        email=f"{user_id}@example.com",
        phone=None,
        attributes=UserAttributes(**attributes),  # type: ignore[arg-type]
    )


def make_session_service(gateway: FakeAuthGateway | None = None) -> SessionService:
    return SessionService(
        gateway=gateway or FakeAuthGateway(),
        role_repository=InMemoryUserRoleRepository(),
        scope=ScreenScope("session"),
    )


def make_media() -> tuple[MediaService, InMemoryBlobStore]:
    store = InMemoryBlobStore()
    return MediaService(store), store


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoiYW5vbiJ9."
            "c2lnbmF0dXJl"
        ),
    )
