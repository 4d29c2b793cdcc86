"""Tests for the session service."""

import asyncio

import pytest

from legal_aid_client.domain.errors import AuthenticationError
from legal_aid_client.domain.models import SessionState, SessionStatus
from legal_aid_client.services.scope import ScreenScope
from legal_aid_client.services.users import SessionService
from tests.conftest import (
    FakeAuthGateway,
    InMemoryUserRoleRepository,
    make_session_service,
    make_user,
)


def test_start_publishes_current_user() -> None:
    gateway = FakeAuthGateway(user=make_user("u1"))
    service = make_session_service(gateway)

    assert service.session_state.value == SessionState.loading()

    user = asyncio.run(service.start())

    assert user is not None
    assert service.session_state.value.status is SessionStatus.AUTHENTICATED
    assert service.user_id.value == "u1"
    assert len(gateway.listeners) == 1


def test_start_without_session_is_unauthenticated() -> None:
    service = make_session_service()

    asyncio.run(service.start())

    assert service.session_state.value == SessionState.unauthenticated()
    assert service.user_id.value is None


def test_stop_unsubscribes_from_provider() -> None:
    gateway = FakeAuthGateway()
    service = make_session_service(gateway)
    asyncio.run(service.start())

    service.stop()

    assert gateway.listeners == []


def test_provider_events_update_state() -> None:
    gateway = FakeAuthGateway()
    service = make_session_service(gateway)
    asyncio.run(service.start())

    gateway.user = make_user("u7")
    gateway._emit()

    assert service.user_id.value == "u7"

    gateway.user = None
    gateway._emit()

    assert service.session_state.value.status is SessionStatus.UNAUTHENTICATED


def test_sign_in_and_sign_out() -> None:
    gateway = FakeAuthGateway()
    gateway.register("ana@example.com", "secret", make_user("u1"))
    service = make_session_service(gateway)

    async def scenario() -> None:
        await service.start()
        await service.sign_in("ana@example.com", "secret")
        assert service.user_id.value == "u1"
        await service.sign_out()
        await asyncio.sleep(0)

    asyncio.run(scenario())

    assert service.user_id.value is None
    assert service.session_state.value.status is SessionStatus.UNAUTHENTICATED


def test_sign_in_failure_raises_authentication_error() -> None:
    gateway = FakeAuthGateway()
    gateway.register("ana@example.com", "secret", make_user("u1"))
    service = make_session_service(gateway)

    with pytest.raises(AuthenticationError, match="Sign-in failed"):
        asyncio.run(service.sign_in("ana@example.com", "wrong"))

    assert service.user_id.value is None


def test_sign_up_sets_default_attributes() -> None:
    gateway = FakeAuthGateway()
    service = make_session_service(gateway)

    user = asyncio.run(
        service.sign_up(
            "alumno@TEC.mx", "secret", "Ana", "Pérez", "López", "8112345678"
        )
    )

    assert user is not None
    email, attributes = gateway.signed_up[0]
    assert email == "alumno@TEC.mx"
    assert attributes.role == 0
    assert attributes.is_institutional_email is True
    assert attributes.biometric_enabled is False
    assert attributes.full_name() == "Ana Pérez López"
    assert service.user_id.value == user.id


def test_sign_up_non_institutional_email() -> None:
    gateway = FakeAuthGateway()
    service = make_session_service(gateway)

    asyncio.run(service.sign_up("ana@gmail.com", "secret", "Ana", "", "", ""))

    assert gateway.signed_up[0][1].is_institutional_email is False


def test_sign_up_failure_raises() -> None:
    gateway = FakeAuthGateway(failing={"sign_up"})
    service = make_session_service(gateway)

    with pytest.raises(AuthenticationError, match="Sign-up failed"):
        asyncio.run(service.sign_up("ana@gmail.com", "secret", "Ana", "", "", ""))


def test_accessors_read_current_user() -> None:
    gateway = FakeAuthGateway(
        user=make_user(
            "u1",
            name="Ana",
            first_last_name="Pérez",
            phone="8112345678",
            is_institutional_email=True,
        )
    )
    service = make_session_service(gateway)

    assert asyncio.run(service.get_user_id()) == "u1"
    assert asyncio.run(service.get_user_name()) == "Ana Pérez"
    assert asyncio.run(service.get_user_email()) == "u1@example.com"
    assert asyncio.run(service.get_user_phone()) == "8112345678"
    assert asyncio.run(service.is_institutional_email()) is True
    assert asyncio.run(service.is_biometric_enabled()) is False


def test_accessors_without_session() -> None:
    service = make_session_service()

    with pytest.raises(AuthenticationError):
        asyncio.run(service.get_user_id())
    assert asyncio.run(service.get_user_name()) is None
    assert asyncio.run(service.get_user_email()) is None
    assert asyncio.run(service.get_user_phone()) is None


def test_get_user_role_reads_repository_and_defaults() -> None:
    gateway = FakeAuthGateway(user=make_user("u1"))
    roles = InMemoryUserRoleRepository(roles={"u1": 2})
    service = SessionService(
        gateway=gateway, role_repository=roles, scope=ScreenScope("session")
    )

    assert asyncio.run(service.get_user_role()) == 2

    roles.roles.clear()
    assert asyncio.run(service.get_user_role()) == 0

    roles.failing.add("get_role")
    assert asyncio.run(service.get_user_role()) == 0


def test_update_biometric_setting_keeps_other_attributes() -> None:
    gateway = FakeAuthGateway(user=make_user("u1", name="Ana", role=1))
    service = make_session_service(gateway)

    asyncio.run(service.update_biometric_setting(True))

    assert gateway.user is not None
    assert gateway.user.attributes.biometric_enabled is True
    assert gateway.user.attributes.name == "Ana"
    assert gateway.user.attributes.role == 1
    assert asyncio.run(service.is_biometric_enabled()) is True


def test_update_biometric_setting_failure_raises() -> None:
    gateway = FakeAuthGateway(user=make_user("u1"), failing={"update_attributes"})
    service = make_session_service(gateway)

    with pytest.raises(AuthenticationError):
        asyncio.run(service.update_biometric_setting(True))
