"""
Password-path errors.

Only ``login`` and ``register`` raise these; the biometric path reports
failures through ``BiometricResult`` instead.
"""

from __future__ import annotations

from typing import Optional


class AuthError(Exception):
    """Base class for authentication failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RejectedError(AuthError):
    """The server answered with a non-200 status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class TransportError(AuthError):
    """The request never produced a response (DNS, connect, timeout, …)."""


class InvalidResponseError(AuthError):
    """HTTP 200 arrived, but the body lacks the fields we need."""


class StorageError(AuthError):
    """The server accepted, but the credentials could not be stored locally."""
