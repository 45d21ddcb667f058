"""
Value encryption: encrypt / decrypt stored credentials at rest.

Uses Fernet (AES-128-CBC + HMAC-SHA256) from the ``cryptography`` library.
The key comes from ``Settings.credential_encryption_key``
(env var: ``CREDENTIAL_ENCRYPTION_KEY``).

If no key is configured, encryption is **disabled** and values are stored
as plaintext (with a warning).  Generate a key with::

    python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class ValueCipher:
    """Fernet wrapper that degrades to a pass-through without a key."""

    def __init__(self, key: Optional[Union[str, bytes]] = None):
        self._fernet: Optional[Fernet] = None

        if not key:
            logger.warning(
                "CREDENTIAL_ENCRYPTION_KEY not set: credentials will be stored as plaintext. "
                "Generate a key: python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
            )
            return

        # Malformed keys raise ValueError.
        self._fernet = Fernet(key.encode() if isinstance(key, str) else key)
        logger.info("Credential encryption enabled (Fernet/AES-128-CBC)")

    @property
    def enabled(self) -> bool:
        return self._fernet is not None

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a value for storage.

        Returns the Fernet ciphertext (URL-safe base64), or the plaintext
        unchanged when encryption is disabled.
        """
        if self._fernet is None:
            return plaintext
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> Optional[str]:
        """
        Decrypt a stored value.

        Returns ``None`` for values that do not decrypt under the current
        key (rotated key, tampered file); callers treat them as absent.
        """
        if self._fernet is None:
            return ciphertext
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except InvalidToken:
            logger.warning("Stored credential could not be decrypted; ignoring it")
            return None
