"""Dependency container wiring for the client."""

from dataclasses import dataclass

from supabase import create_client

from legal_aid_client.adapters.supabase_auth_gateway import SupabaseAuthGateway
from legal_aid_client.adapters.supabase_blob_store import SupabaseBlobStore
from legal_aid_client.adapters.supabase_booking_repository import (
    SupabaseBookingRepository,
)
from legal_aid_client.adapters.supabase_case_repository import SupabaseCaseRepository
from legal_aid_client.adapters.supabase_content_repository import (
    SupabaseContentRepository,
)
from legal_aid_client.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from legal_aid_client.adapters.supabase_user_repository import SupabaseUserRepository
from legal_aid_client.app_logging import configure_logging
from legal_aid_client.config import Settings
from legal_aid_client.services.media import MediaService
from legal_aid_client.services.scope import ScreenScope
from legal_aid_client.services.users import SessionService
from legal_aid_client.viewmodels.appointments import AppointmentsViewModel
from legal_aid_client.viewmodels.bookings import BookingsViewModel
from legal_aid_client.viewmodels.home import HomeViewModel
from legal_aid_client.viewmodels.profile import ProfileViewModel


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    media_service: MediaService
    bookings_view_model: BookingsViewModel
    appointments_view_model: AppointmentsViewModel
    home_view_model: HomeViewModel
    profile_view_model: ProfileViewModel


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    booking_repository = SupabaseBookingRepository(supabase_client)
    media_service = MediaService(SupabaseBlobStore(supabase_client))
    session_service = SessionService(
        gateway=SupabaseAuthGateway(supabase_client),
        role_repository=SupabaseUserRepository(supabase_client),
        scope=ScreenScope("session"),
        institutional_email_domain=resolved_settings.institutional_email_domain,
    )
    bookings_view_model = BookingsViewModel(
        repository=booking_repository,
        user_id=session_service.user_id,
    )
    appointments_view_model = AppointmentsViewModel(
        repository=booking_repository,
        case_repository=SupabaseCaseRepository(supabase_client),
    )
    home_view_model = HomeViewModel(
        repository=SupabaseContentRepository(supabase_client),
        media=media_service,
        image_bucket=resolved_settings.post_image_bucket,
        default_header_url=resolved_settings.default_header_url,
    )
    profile_view_model = ProfileViewModel(
        repository=SupabaseProfileRepository(supabase_client),
        session=session_service,
        media=media_service,
        image_bucket=resolved_settings.profile_image_bucket,
    )
    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        media_service=media_service,
        bookings_view_model=bookings_view_model,
        appointments_view_model=appointments_view_model,
        home_view_model=home_view_model,
        profile_view_model=profile_view_model,
    )
