"""
Android provider: uses ``Settings.Secure.ANDROID_ID``.

The id is stable for an app-signing key + user + device combination and
only changes on factory reset.
"""

from __future__ import annotations

from device.base import DeviceIdentityProvider


class AndroidDeviceIdProvider(DeviceIdentityProvider):
    @property
    def platform(self) -> str:
        return "android"

    @property
    def identifier_name(self) -> str:
        return "ANDROID_ID"
