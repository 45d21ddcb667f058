"""
device: Device Identity Providers.

Each supported platform family gets its own provider; the right one is
picked once at startup by ``create_device_provider``.
"""

from device.base import (
    DeviceIdentityError,
    DeviceIdentityProvider,
    UnsupportedPlatformError,
)
from device.android import AndroidDeviceIdProvider
from device.ios import IOSDeviceIdProvider
from device.registry import create_device_provider, detect_platform

__all__ = [
    "AndroidDeviceIdProvider",
    "DeviceIdentityError",
    "DeviceIdentityProvider",
    "IOSDeviceIdProvider",
    "UnsupportedPlatformError",
    "create_device_provider",
    "detect_platform",
]
