"""
Client settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import Dict, Optional


class Settings(BaseSettings):
    # ── Auth API ─────────────────────────────────────────────────────────
    api_base_url: str = "https://biometric.rizme-labs.xyz/api"
    http_timeout: float = 15.0          # seconds, handed to the transport as-is
    default_headers: Dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    # ── Credential store ─────────────────────────────────────────────────
    credential_store_path: str = "~/.biometric_session/credentials.json"
    credential_encryption_key: str = ""  # Fernet key for values at rest

    # ── Device identity ──────────────────────────────────────────────────
    device_platform: Optional[str] = None   # "android" | "ios"; autodetected when unset

    # ── Biometric prompt ─────────────────────────────────────────────────
    biometric_reason: str = "Please authenticate to proceed"
    biometric_sticky_auth: bool = True
    biometric_only: bool = True

    debug: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    def challenge_options(self) -> dict:
        """Keyword options forwarded to ``BiometricGate.challenge``."""
        return {
            "sticky_auth": self.biometric_sticky_auth,
            "biometric_only": self.biometric_only,
        }


config = Settings()
