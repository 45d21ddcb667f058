"""
storage: Credential Store implementations.

Provides:
  • ``CredentialStore`` contract (read / write / write_many / delete)
  • In-memory store for tests and throwaway sessions
  • JSON file store with Fernet-encrypted values at rest
"""

from storage.base import AUTH_TOKEN, DEVICE_ID, USER_ID, CredentialStore, CredentialStoreError
from storage.file_store import FileCredentialStore
from storage.memory import InMemoryCredentialStore

__all__ = [
    "AUTH_TOKEN",
    "DEVICE_ID",
    "USER_ID",
    "CredentialStore",
    "CredentialStoreError",
    "FileCredentialStore",
    "InMemoryCredentialStore",
]
