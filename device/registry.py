"""
Provider selection: maps the host platform to a DeviceIdentityProvider.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, Optional, Type

from device.android import AndroidDeviceIdProvider
from device.base import DeviceIdentityProvider, DeviceIdReader, UnsupportedPlatformError
from device.ios import IOSDeviceIdProvider

logger = logging.getLogger(__name__)

# ── Supported platform families: add new ones here ──────────────────────

_PROVIDERS: Dict[str, Type[DeviceIdentityProvider]] = {
    "android": AndroidDeviceIdProvider,
    "ios": IOSDeviceIdProvider,
}


def detect_platform(override: Optional[str] = None) -> str:
    """
    Return the platform slug for this host.

    *override* (usually ``Settings.device_platform``) wins when set;
    otherwise ``sys.platform`` is used as reported by the interpreter.
    """
    if override:
        return override.strip().lower()
    return sys.platform


def create_device_provider(
    platform: Optional[str],
    reader: DeviceIdReader,
) -> DeviceIdentityProvider:
    """
    Build the provider for *platform* (autodetected when ``None``).

    Raises
    ------
    UnsupportedPlatformError – platform is neither Android nor iOS
    """
    slug = detect_platform(platform)
    provider_cls = _PROVIDERS.get(slug)
    if provider_cls is None:
        raise UnsupportedPlatformError(slug)
    logger.info("Device identity provider: %s", provider_cls.__name__)
    return provider_cls(reader)


def supported_platforms() -> list[str]:
    return list(_PROVIDERS.keys())
