"""
CredentialStore: abstract key/value holder for session credentials.

Values are plain strings.  Implementations must be safe to call from
overlapping coroutines and threads; ``write_many`` is all-or-nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional

# Persisted key names
AUTH_TOKEN = "auth_token"
USER_ID = "user_id"
DEVICE_ID = "device_id"


class CredentialStoreError(Exception):
    """The backing storage could not be read or written."""


class CredentialStore(ABC):
    """Abstract base for all credential stores."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored value, or ``None`` when the key is absent."""
        ...

    @abstractmethod
    def write_many(self, values: Mapping[str, str], *, remove: Iterable[str] = ()) -> None:
        """
        Persist several keys and drop others in one step.

        Either every value in *values* is stored and every key in *remove*
        deleted, or nothing changes.

        Raises
        ------
        TypeError            – a value is not a ``str``
        CredentialStoreError – the backing storage failed
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*.  Deleting an absent key is a no-op."""
        ...

    def write(self, key: str, value: str) -> None:
        self.write_many({key: value})

    def contains(self, key: str) -> bool:
        return self.read(key) is not None
