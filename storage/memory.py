"""
In-memory credential store.  Nothing survives the process.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, Mapping, Optional

from storage.base import CredentialStore


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._lock = threading.RLock()
        self._values: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def write_many(self, values: Mapping[str, str], *, remove: Iterable[str] = ()) -> None:
        for key, value in values.items():
            if not isinstance(value, str):
                raise TypeError(f"Value for '{key}' must be str, got {type(value).__name__}")
        with self._lock:
            for key in remove:
                self._values.pop(key, None)
            self._values.update(values)

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        """Copy of the current contents."""
        with self._lock:
            return dict(self._values)
