"""
File-backed credential store.

Keeps a single JSON object ``{key: value}`` on disk.  Values go through a
``ValueCipher`` so that a configured Fernet key encrypts them at rest.
Every mutation rewrites the whole file via a temp file + ``os.replace``,
so a crash never leaves a half-written document behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Union

from storage.base import CredentialStore, CredentialStoreError
from storage.encryption import ValueCipher

logger = logging.getLogger(__name__)


class FileCredentialStore(CredentialStore):
    """JSON file store, readable only by the owning user (mode 0600)."""

    def __init__(
        self,
        path: Union[str, os.PathLike],
        *,
        encryption_key: Optional[Union[str, bytes]] = None,
    ):
        self.path = Path(path).expanduser()
        self._cipher = ValueCipher(encryption_key)
        self._lock = threading.RLock()

    # ── CredentialStore ─────────────────────────────────────────────────

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            raw = self._load().get(key)
        if raw is None:
            return None
        return self._cipher.decrypt(raw)

    def write_many(self, values: Mapping[str, str], *, remove: Iterable[str] = ()) -> None:
        for key, value in values.items():
            if not isinstance(value, str):
                raise TypeError(f"Value for '{key}' must be str, got {type(value).__name__}")
        with self._lock:
            data = self._load()
            for key in remove:
                data.pop(key, None)
            for key, value in values.items():
                data[key] = self._cipher.encrypt(value)
            self._dump(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._dump(data)

    # ── Helpers ─────────────────────────────────────────────────────────

    def _load(self) -> Dict[str, str]:
        """
        Current file contents.

        A file that is not a JSON object reads as empty and is overwritten
        by the next write; the user falls back to the password path.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except ValueError as exc:
            logger.error("Credential file %s is corrupt, treating it as empty: %s", self.path, exc)
            return {}
        except OSError as exc:
            raise CredentialStoreError(f"Cannot read credential file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            logger.error("Credential file %s does not hold a JSON object, treating it as empty", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=".credentials-", suffix=".tmp"
            )
        except OSError as exc:
            raise CredentialStoreError(f"Cannot write credential file {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except BaseException as exc:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            if isinstance(exc, OSError):
                raise CredentialStoreError(f"Cannot write credential file {self.path}: {exc}") from exc
            raise
