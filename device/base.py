"""
DeviceIdentityProvider: abstract source of a stable device identifier.

The identifier itself comes from the host OS through a *reader* callable
(a thin bridge to the platform API).  Providers only validate and
normalise what the reader returns.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)

DeviceIdReader = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]


class DeviceIdentityError(Exception):
    """The platform could not supply a device identifier."""


class UnsupportedPlatformError(DeviceIdentityError):
    """The host platform is not one of the supported families."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform!r}")


class DeviceIdentityProvider(ABC):
    """Abstract base for platform device-id providers."""

    def __init__(self, reader: DeviceIdReader):
        self._reader = reader

    @property
    @abstractmethod
    def platform(self) -> str:
        """Platform slug: 'android', 'ios'."""
        ...

    @property
    @abstractmethod
    def identifier_name(self) -> str:
        """Name of the platform attribute the id comes from."""
        ...

    async def get_device_id(self) -> str:
        """
        Return the device identifier.

        Raises
        ------
        DeviceIdentityError – the reader failed or returned an empty value
        """
        try:
            value = self._reader()
            if inspect.isawaitable(value):
                value = await value
        except DeviceIdentityError:
            raise
        except Exception as exc:
            raise DeviceIdentityError(
                f"Reading {self.identifier_name} failed on {self.platform}: {exc}"
            ) from exc

        device_id = (value or "").strip() if isinstance(value, str) else ""
        if not device_id:
            raise DeviceIdentityError(
                f"{self.identifier_name} is not available on this {self.platform} device"
            )
        return device_id
