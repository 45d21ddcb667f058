"""
AuthSessionClient: password and device-bound biometric sign-in.

Two error regimes:
  • password path (``login`` / ``register``) raises ``AuthError`` subclasses,
    the user is present and can correct their input;
  • biometric path returns a ``BiometricResult`` and never raises.
``logout`` never fails from the caller's point of view.

The server never trusts the local biometric verdict.  What it verifies is
the ``user_id`` + ``device_id`` pair bound earlier by ``register-biometric``
under a password-authenticated session.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from auth.errors import InvalidResponseError, RejectedError, StorageError, TransportError
from auth.results import BiometricOutcome, BiometricResult
from auth.schemas import (
    AuthResponse,
    BiometricLoginRequest,
    BiometricRegisterRequest,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)
from auth.state import SessionState, derive_state
from auth.transport import AuthApi, error_message, json_body
from biometrics.base import BiometricGate, UnavailableBiometricGate
from config.settings import Settings
from device.base import DeviceIdentityError, DeviceIdentityProvider
from storage.base import AUTH_TOKEN, DEVICE_ID, USER_ID, CredentialStore, CredentialStoreError

logger = logging.getLogger(__name__)

_LOGIN_PATH = "/auth/login"
_REGISTER_PATH = "/auth/register"
_LOGOUT_PATH = "/auth/logout"
_REGISTER_BIOMETRIC_PATH = "/auth/register-biometric"
_BIOMETRIC_LOGIN_PATH = "/auth/biometric-login"


class AuthSessionClient:
    """
    Orchestrates the auth exchanges against a credential store.

    Parameters
    ----------
    settings : Settings
        Base URL, headers, transport timeout and biometric prompt options.
    store : CredentialStore
        Owner of ``auth_token`` / ``user_id`` / ``device_id``.
    gate : BiometricGate, optional
        Local biometric prompt.  Defaults to a gate that is never available.
    device_provider : DeviceIdentityProvider, optional
        Source of the device id.  Without one, biometric registration
        reports ``LOCAL_UNAVAILABLE``.
    transport : httpx.AsyncBaseTransport, optional
        Injected transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        settings: Settings,
        store: CredentialStore,
        gate: Optional[BiometricGate] = None,
        device_provider: Optional[DeviceIdentityProvider] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._store = store
        self._gate = gate or UnavailableBiometricGate()
        self._device = device_provider
        self._api = AuthApi(settings, transport=transport)

    async def __aenter__(self) -> "AuthSessionClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._api.aclose()

    # ── Local state ─────────────────────────────────────────────────────

    def is_logged_in(self) -> bool:
        """
        True when a session token is stored.

        The token is not validated; an expired token still counts until the
        server rejects it.  An unreadable store counts as logged out.
        """
        try:
            return self._store.contains(AUTH_TOKEN)
        except CredentialStoreError as exc:
            logger.error("Credential store unreadable: %s", exc)
            return False

    def session_state(self) -> SessionState:
        try:
            return derive_state(
                has_token=self._store.contains(AUTH_TOKEN),
                has_user_id=self._store.contains(USER_ID),
                has_device_id=self._store.contains(DEVICE_ID),
            )
        except CredentialStoreError as exc:
            logger.error("Credential store unreadable: %s", exc)
            return SessionState.UNENROLLED

    async def get_device_id(self) -> str:
        """Raises ``DeviceIdentityError`` when no identifier is available."""
        if self._device is None:
            raise DeviceIdentityError("No device identity provider configured")
        return await self._device.get_device_id()

    # ── Password path ───────────────────────────────────────────────────

    async def login(self, email: str, password: str) -> None:
        """
        Exchange email + password for a session token.

        Raises
        ------
        RejectedError        – server answered non-200
        TransportError       – no response
        InvalidResponseError – 200 without ``token`` / ``user.id``
        StorageError         – accepted, but the store could not be written
        """
        payload = LoginRequest(email=email, password=password).model_dump()
        await self._password_exchange(_LOGIN_PATH, payload, "Login failed")

    async def register(self, email: str, password: str, confirm_password: str) -> None:
        """
        Create an account and sign in.  The confirmation is checked by the
        server only.  Raises like ``login``.
        """
        payload = RegisterRequest(
            email=email,
            password=password,
            password_confirmation=confirm_password,
        ).model_dump()
        await self._password_exchange(_REGISTER_PATH, payload, "Registration failed")

    async def _password_exchange(
        self,
        path: str,
        payload: Dict[str, Any],
        default_message: str,
    ) -> None:
        try:
            response = await self._api.post(path, payload)
        except httpx.HTTPError as exc:
            logger.warning("%s: transport error: %s", path, exc)
            raise TransportError(f"Could not reach the auth server: {exc}") from exc

        if response.status_code != 200:
            message = error_message(response, default_message)
            logger.info("%s rejected (HTTP %d): %s", path, response.status_code, message)
            raise RejectedError(message, response.status_code)

        try:
            body = AuthResponse.model_validate(json_body(response))
        except ValidationError as exc:
            logger.error("%s: malformed success body: %s", path, exc)
            raise InvalidResponseError(f"Malformed response from {path}") from exc

        # A device binding belongs to the account that registered it.
        try:
            previous_user = self._store.read(USER_ID)
            stale = (DEVICE_ID,) if previous_user != body.user_id else ()
            self._store.write_many(
                {AUTH_TOKEN: body.token, USER_ID: body.user_id},
                remove=stale,
            )
        except CredentialStoreError as exc:
            logger.error("%s: could not store credentials: %s", path, exc)
            raise StorageError(f"Could not store credentials: {exc}") from exc
        logger.info("Signed in via %s as user %s", path, body.user_id)

    async def logout(self) -> None:
        """Best-effort server notification; the local token is always dropped."""
        try:
            token = self._store.read(AUTH_TOKEN)
            if token is not None:
                response = await self._api.post(_LOGOUT_PATH, token=token)
                if response.status_code != 200:
                    logger.info("Logout notification answered HTTP %d", response.status_code)
        except Exception as exc:
            logger.warning("Logout error: %s", exc)
        finally:
            try:
                self._store.delete(AUTH_TOKEN)
            except Exception:
                logger.exception("Could not delete the stored session token")

    # ── Biometric path ──────────────────────────────────────────────────

    async def register_biometric_user(self) -> bool:
        return (await self.register_biometric()).ok

    async def register_biometric(self) -> BiometricResult:
        """
        Bind this device to the signed-in account.

        Requires a stored session token.  ``device_id`` is stored only after
        the server accepted the binding.
        """
        try:
            token = self._store.read(AUTH_TOKEN)
            if token is None:
                return _failed(
                    BiometricOutcome.LOCAL_UNAVAILABLE,
                    "Not signed in; a password login is required first",
                )

            try:
                device_id = await self.get_device_id()
            except DeviceIdentityError as exc:
                return _failed(BiometricOutcome.LOCAL_UNAVAILABLE, str(exc))

            payload = BiometricRegisterRequest(device_id=device_id).model_dump()
            try:
                response = await self._api.post(_REGISTER_BIOMETRIC_PATH, payload, token=token)
            except httpx.HTTPError as exc:
                return _failed(BiometricOutcome.TRANSPORT, f"Transport error: {exc}")

            if response.status_code != 200:
                return _failed(
                    BiometricOutcome.REMOTE_REJECTED,
                    f"Biometric registration rejected (HTTP {response.status_code})",
                )

            self._store.write(DEVICE_ID, device_id)
            logger.info("Biometric login registered for this device")
            return BiometricResult.success()

        except Exception as exc:
            logger.exception("Biometric registration error")
            return BiometricResult.failure(BiometricOutcome.LOCAL_UNAVAILABLE, str(exc))

    async def check_biometric_availability(self) -> bool:
        try:
            return bool(await self._gate.is_available())
        except Exception as exc:
            logger.warning("Biometric check error: %s", exc)
            return False

    async def authenticate_user(self) -> bool:
        return (await self.authenticate()).ok

    async def authenticate(self) -> BiometricResult:
        """
        Local biometric challenge followed by ``biometric-login``.

        The challenge is not shown when biometrics are unavailable.
        """
        try:
            if not await self.check_biometric_availability():
                return _failed(BiometricOutcome.LOCAL_UNAVAILABLE, "Biometrics not available")

            try:
                approved = await self._gate.challenge(
                    self._settings.biometric_reason,
                    **self._settings.challenge_options(),
                )
            except Exception as exc:
                return _failed(BiometricOutcome.LOCAL_DENIED, f"Biometric prompt failed: {exc}")

            if not approved:
                return _failed(BiometricOutcome.LOCAL_DENIED, "Biometric check not passed")

            return await self._biometric_login()

        except Exception as exc:
            logger.exception("Authentication error")
            return BiometricResult.failure(BiometricOutcome.LOCAL_UNAVAILABLE, str(exc))

    async def _biometric_login(self) -> BiometricResult:
        # No bearer token here: the stored user/device pair is the credential.
        try:
            user_id = self._store.read(USER_ID)
            device_id = self._store.read(DEVICE_ID)
            if not user_id or not device_id:
                return _failed(BiometricOutcome.LOCAL_UNAVAILABLE, "No stored credentials found")

            payload = BiometricLoginRequest(user_id=user_id, device_id=device_id).model_dump()
            try:
                response = await self._api.post(_BIOMETRIC_LOGIN_PATH, payload)
            except httpx.HTTPError as exc:
                return _failed(BiometricOutcome.TRANSPORT, f"Transport error: {exc}")

            if response.status_code != 200:
                return _failed(
                    BiometricOutcome.REMOTE_REJECTED,
                    f"Biometric login rejected (HTTP {response.status_code})",
                )

            try:
                body = TokenResponse.model_validate(json_body(response))
            except ValidationError:
                return _failed(BiometricOutcome.REMOTE_REJECTED, "Biometric login response has no token")

            self._store.write(AUTH_TOKEN, body.token)
            logger.info("Biometric login succeeded for user %s", user_id)
            return BiometricResult.success()

        except Exception as exc:
            logger.exception("Server authentication error")
            return BiometricResult.failure(BiometricOutcome.LOCAL_UNAVAILABLE, str(exc))


def _failed(outcome: BiometricOutcome, detail: str) -> BiometricResult:
    logger.warning("Biometric path: %s: %s", outcome.value, detail)
    return BiometricResult.failure(outcome, detail)
