"""
BiometricGate: abstract wrapper around the platform biometric prompt.

Platform bridges (LocalAuthentication on iOS, BiometricPrompt on Android)
subclass this and implement both methods.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BiometricGate(ABC):
    """Abstract base for biometric gates."""

    @abstractmethod
    async def is_available(self) -> bool:
        """
        True when the device has biometric hardware *and* at least one
        enrolled biometric.
        """
        ...

    @abstractmethod
    async def challenge(
        self,
        reason: str,
        *,
        sticky_auth: bool = True,
        biometric_only: bool = True,
    ) -> bool:
        """
        Show the interactive prompt and wait for the user.

        Parameters
        ----------
        reason : str
            Text shown in the system prompt.
        sticky_auth : bool
            Keep the prompt alive when the app is backgrounded.
        biometric_only : bool
            Refuse device-credential (PIN/pattern) fallback.

        Returns
        -------
        True only if the user passed the check.  Cancellation, lockout and
        missing hardware all return False.
        """
        ...


class UnavailableBiometricGate(BiometricGate):
    """Gate for hosts without a biometric bridge."""

    async def is_available(self) -> bool:
        return False

    async def challenge(
        self,
        reason: str,
        *,
        sticky_auth: bool = True,
        biometric_only: bool = True,
    ) -> bool:
        return False
