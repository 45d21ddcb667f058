"""
Outcome types for the biometric path.

Biometric calls never raise; they return a ``BiometricResult`` whose
``ok`` flag is what the UI sees.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class BiometricOutcome(str, Enum):
    OK = "ok"
    LOCAL_UNAVAILABLE = "local_unavailable"   # no sensor, no stored ids, no token, no device id
    LOCAL_DENIED = "local_denied"             # user cancelled / failed the prompt
    REMOTE_REJECTED = "remote_rejected"       # server answered non-200 or a bad body
    TRANSPORT = "transport"                   # no response at all


class BiometricResult(BaseModel):
    outcome: BiometricOutcome
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is BiometricOutcome.OK

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "BiometricResult":
        return cls(outcome=BiometricOutcome.OK)

    @classmethod
    def failure(cls, outcome: BiometricOutcome, detail: str) -> "BiometricResult":
        return cls(outcome=outcome, detail=detail)
