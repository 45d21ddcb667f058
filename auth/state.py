"""
Client-observable session states.
"""

from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    UNENROLLED = "unenrolled"
    UNENROLLED_BOUND = "unenrolled_bound"            # logged out, biometric re-auth possible
    AUTHENTICATED_UNBOUND = "authenticated_unbound"
    AUTHENTICATED_BOUND = "authenticated_bound"

    @property
    def authenticated(self) -> bool:
        return self in (SessionState.AUTHENTICATED_UNBOUND, SessionState.AUTHENTICATED_BOUND)

    @property
    def bound(self) -> bool:
        return self in (SessionState.UNENROLLED_BOUND, SessionState.AUTHENTICATED_BOUND)


def derive_state(has_token: bool, has_user_id: bool, has_device_id: bool) -> SessionState:
    bound = has_user_id and has_device_id
    if has_token:
        return SessionState.AUTHENTICATED_BOUND if bound else SessionState.AUTHENTICATED_UNBOUND
    return SessionState.UNENROLLED_BOUND if bound else SessionState.UNENROLLED
