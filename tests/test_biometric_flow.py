"""
Tests for the biometric path: device binding, local gate, biometric login
and the session state machine.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from auth import AuthSessionClient, BiometricOutcome, SessionState
from biometrics import BiometricGate
from device import AndroidDeviceIdProvider, IOSDeviceIdProvider
from storage import InMemoryCredentialStore

from conftest import body_of


# ── helpers ────────────────────────────────────────────────────────────────────


def _gate(available: bool = True, approve: bool = True) -> MagicMock:
    gate = MagicMock(spec=BiometricGate)
    gate.is_available = AsyncMock(return_value=available)
    gate.challenge = AsyncMock(return_value=approve)
    return gate


def _client(settings, store, server, *, gate=None, device_id="D1", provider=None) -> AuthSessionClient:
    if provider is None and device_id is not None:
        provider = AndroidDeviceIdProvider(lambda: device_id)
    return AuthSessionClient(
        settings,
        store,
        gate=gate,
        device_provider=provider,
        transport=server.transport,
    )


# ── Registration ───────────────────────────────────────────────────────────────


class TestRegisterBiometric:
    @pytest.mark.asyncio
    async def test_requires_a_session_token(self, settings, store, server):
        async with _client(settings, store, server) as client:
            assert await client.register_biometric_user() is False
            result = await client.register_biometric()

        assert result.outcome is BiometricOutcome.LOCAL_UNAVAILABLE
        assert server.requests == []
        assert store.snapshot() == {}

    @pytest.mark.asyncio
    async def test_accepted_binding_stores_device_id(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T1", "user_id": "7"})
        server.respond("/auth/register-biometric", 200, {"message": "ok"})

        async with _client(settings, store, server, device_id="D1") as client:
            assert await client.register_biometric_user() is True

        (request,) = server.calls("/auth/register-biometric")
        assert request.headers["authorization"] == "Bearer T1"
        assert body_of(request) == {"device_id": "D1"}
        assert store.snapshot() == {"auth_token": "T1", "user_id": "7", "device_id": "D1"}

    @pytest.mark.asyncio
    async def test_rejected_binding_changes_nothing(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T1", "user_id": "7"})
        before = store.snapshot()
        server.respond("/auth/register-biometric", 401, {"message": "Unauthenticated"})

        async with _client(settings, store, server, device_id="D1") as client:
            result = await client.register_biometric()

        assert result.ok is False
        assert result.outcome is BiometricOutcome.REMOTE_REJECTED
        assert store.snapshot() == before

    @pytest.mark.asyncio
    async def test_transport_failure_is_reported(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T1", "user_id": "7"})
        server.refuse("/auth/register-biometric")

        async with _client(settings, store, server) as client:
            result = await client.register_biometric()

        assert result.outcome is BiometricOutcome.TRANSPORT
        assert store.read("device_id") is None

    @pytest.mark.asyncio
    async def test_missing_device_identifier_sends_nothing(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T1", "user_id": "7"})
        provider = IOSDeviceIdProvider(lambda: None)

        async with _client(settings, store, server, provider=provider) as client:
            result = await client.register_biometric()

        assert result.outcome is BiometricOutcome.LOCAL_UNAVAILABLE
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_without_device_provider(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T1", "user_id": "7"})

        async with _client(settings, store, server, device_id=None) as client:
            assert await client.register_biometric_user() is False

        assert server.requests == []


# ── Local gate ─────────────────────────────────────────────────────────────────


class TestAvailability:
    @pytest.mark.asyncio
    async def test_delegates_to_gate(self, settings, store, server):
        async with _client(settings, store, server, gate=_gate(available=True)) as client:
            assert await client.check_biometric_availability() is True

    @pytest.mark.asyncio
    async def test_gate_error_reads_as_unavailable(self, settings, store, server):
        gate = _gate()
        gate.is_available = AsyncMock(side_effect=RuntimeError("sensor bridge crashed"))

        async with _client(settings, store, server, gate=gate) as client:
            assert await client.check_biometric_availability() is False

    @pytest.mark.asyncio
    async def test_default_gate_is_unavailable(self, settings, store, server):
        async with _client(settings, store, server) as client:
            assert await client.check_biometric_availability() is False


# ── authenticate / biometric login ─────────────────────────────────────────────


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_unavailable_skips_the_challenge(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})
        gate = _gate(available=False)

        async with _client(settings, store, server, gate=gate) as client:
            assert await client.authenticate_user() is False

        gate.challenge.assert_not_awaited()
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_declined_challenge(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})

        async with _client(settings, store, server, gate=_gate(approve=False)) as client:
            result = await client.authenticate()

        assert result.outcome is BiometricOutcome.LOCAL_DENIED
        assert server.requests == []

    @pytest.mark.asyncio
    async def test_challenge_error_collapses_to_false(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})
        gate = _gate()
        gate.challenge = AsyncMock(side_effect=RuntimeError("lockout"))

        async with _client(settings, store, server, gate=gate) as client:
            assert await client.authenticate_user() is False

        assert server.requests == []

    @pytest.mark.asyncio
    async def test_approved_challenge_swaps_in_new_token(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})
        server.respond("/auth/biometric-login", 200, {"token": "T2"})
        gate = _gate()

        async with _client(settings, store, server, gate=gate) as client:
            assert await client.authenticate_user() is True

        assert store.snapshot() == {"auth_token": "T2", "user_id": "7", "device_id": "D1"}
        (request,) = server.calls("/auth/biometric-login")
        assert body_of(request) == {"user_id": "7", "device_id": "D1"}
        assert "authorization" not in request.headers
        gate.challenge.assert_awaited_once_with(
            settings.biometric_reason,
            sticky_auth=True,
            biometric_only=True,
        )

    @pytest.mark.asyncio
    async def test_server_rejection_keeps_stored_state(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T0", "user_id": "7", "device_id": "D1"})
        server.respond("/auth/biometric-login", 401, {"message": "Unknown device"})

        async with _client(settings, store, server, gate=_gate()) as client:
            result = await client.authenticate()

        assert result.outcome is BiometricOutcome.REMOTE_REJECTED
        assert store.read("auth_token") == "T0"

    @pytest.mark.asyncio
    async def test_success_without_token_is_rejected(self, settings, server):
        store = InMemoryCredentialStore({"auth_token": "T0", "user_id": "7", "device_id": "D1"})
        server.respond("/auth/biometric-login", 200, {"user": {"id": 7}})

        async with _client(settings, store, server, gate=_gate()) as client:
            assert await client.authenticate_user() is False

        assert store.read("auth_token") == "T0"

    @pytest.mark.asyncio
    async def test_transport_failure(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})
        server.refuse("/auth/biometric-login")

        async with _client(settings, store, server, gate=_gate()) as client:
            result = await client.authenticate()

        assert result.outcome is BiometricOutcome.TRANSPORT
        assert store.read("auth_token") is None


class TestBiometricLogin:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "stored",
        [
            {"auth_token": "T0", "device_id": "D1"},
            {"auth_token": "T0", "user_id": "7"},
            {"auth_token": "T0"},
        ],
    )
    async def test_missing_identifiers_leave_token_untouched(self, settings, server, stored):
        store = InMemoryCredentialStore(stored)
        server.respond("/auth/biometric-login", 200, {"token": "T2"})

        async with _client(settings, store, server) as client:
            result = await client._biometric_login()

        assert result.ok is False
        assert result.outcome is BiometricOutcome.LOCAL_UNAVAILABLE
        assert store.read("auth_token") == "T0"
        assert server.requests == []


# ── State machine ──────────────────────────────────────────────────────────────


class TestSessionStateMachine:
    @pytest.mark.asyncio
    async def test_full_cycle(self, settings, store, server):
        server.respond("/auth/login", 200, {"token": "T1", "user": {"id": 7}})
        server.respond("/auth/register-biometric", 200, {})
        server.respond("/auth/logout", 200, {})
        server.respond("/auth/biometric-login", 200, {"token": "T2"})

        async with _client(settings, store, server, gate=_gate(), device_id="D1") as client:
            assert client.session_state() is SessionState.UNENROLLED

            await client.login("a@b.com", "pw")
            assert client.session_state() is SessionState.AUTHENTICATED_UNBOUND

            assert await client.register_biometric_user() is True
            assert client.session_state() is SessionState.AUTHENTICATED_BOUND

            await client.logout()
            state = client.session_state()
            assert state is SessionState.UNENROLLED_BOUND
            assert state.bound and not state.authenticated
            assert client.is_logged_in() is False

            assert await client.authenticate_user() is True
            assert client.session_state() is SessionState.AUTHENTICATED_BOUND

        assert store.snapshot() == {"auth_token": "T2", "user_id": "7", "device_id": "D1"}

    @pytest.mark.asyncio
    async def test_lost_identifiers_force_password_path(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7"})

        async with _client(settings, store, server, gate=_gate()) as client:
            assert client.session_state() is SessionState.UNENROLLED
            assert await client.authenticate_user() is False

        assert server.requests == []

    @pytest.mark.asyncio
    async def test_other_account_login_drops_device_binding(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})
        server.respond("/auth/login", 200, {"token": "TB", "user": {"id": 99}})

        async with _client(settings, store, server, gate=_gate()) as client:
            await client.login("other@b.com", "pw")
            assert client.session_state() is SessionState.AUTHENTICATED_UNBOUND

        assert store.snapshot() == {"auth_token": "TB", "user_id": "99"}

    @pytest.mark.asyncio
    async def test_same_account_login_keeps_device_binding(self, settings, server):
        store = InMemoryCredentialStore({"user_id": "7", "device_id": "D1"})
        server.respond("/auth/login", 200, {"token": "T3", "user": {"id": 7}})

        async with _client(settings, store, server) as client:
            await client.login("a@b.com", "pw")
            assert client.session_state() is SessionState.AUTHENTICATED_BOUND

        assert store.snapshot() == {"auth_token": "T3", "user_id": "7", "device_id": "D1"}
