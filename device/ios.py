"""
iOS provider: uses ``UIDevice.identifierForVendor``.

iOS may report no identifier right after a device restart before first
unlock; that case surfaces as ``DeviceIdentityError`` instead of an
empty string.
"""

from __future__ import annotations

from device.base import DeviceIdentityProvider


class IOSDeviceIdProvider(DeviceIdentityProvider):
    @property
    def platform(self) -> str:
        return "ios"

    @property
    def identifier_name(self) -> str:
        return "identifierForVendor"
