"""
auth: client-side session authentication.

Provides:
  • ``AuthSessionClient`` (login / register / logout / biometric sign-in)
  • Password-path errors (``AuthError`` and subclasses)
  • ``BiometricResult`` outcomes for the biometric path
  • ``SessionState`` derived from the credential store
"""

from auth.client import AuthSessionClient
from auth.errors import (
    AuthError,
    InvalidResponseError,
    RejectedError,
    StorageError,
    TransportError,
)
from auth.results import BiometricOutcome, BiometricResult
from auth.state import SessionState

__all__ = [
    "AuthError",
    "AuthSessionClient",
    "BiometricOutcome",
    "BiometricResult",
    "InvalidResponseError",
    "RejectedError",
    "SessionState",
    "StorageError",
    "TransportError",
]
