"""
Biometric session client: command-line entry point.

Usage:
    python main.py login you@example.com
    python main.py register you@example.com
    python main.py status
    python main.py register-biometric
    python main.py logout

The password is prompted for.  Biometric registration needs
``DEVICE_PLATFORM`` (android / ios) and a ``DEVICE_ID`` in the environment
when run off-device.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import os
import sys
from typing import Optional

from auth import AuthError, AuthSessionClient
from biometrics import BiometricGate
from config.settings import Settings, config
from device import DeviceIdentityProvider, UnsupportedPlatformError, create_device_provider
from device.base import DeviceIdReader
from device.registry import supported_platforms
from storage import FileCredentialStore


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stderr,
    )
    for _noisy in ("httpcore", "httpx"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_client(
    settings: Settings,
    *,
    reader: Optional[DeviceIdReader] = None,
    gate: Optional[BiometricGate] = None,
) -> AuthSessionClient:
    """
    Wire a client from settings: file store, device provider, gate.

    Without a *reader* the client has no device identity and only the
    password path works.

    Raises
    ------
    UnsupportedPlatformError – a reader was given but the host is neither
                               Android nor iOS
    """
    provider: Optional[DeviceIdentityProvider] = None
    if reader is not None:
        provider = create_device_provider(settings.device_platform, reader)

    store = FileCredentialStore(
        settings.credential_store_path,
        encryption_key=settings.credential_encryption_key or None,
    )

    return AuthSessionClient(settings, store, gate=gate, device_provider=provider)


async def _run(args: argparse.Namespace) -> int:
    reader = (lambda: os.environ["DEVICE_ID"]) if "DEVICE_ID" in os.environ else None
    try:
        client = create_client(config, reader=reader)
    except UnsupportedPlatformError as exc:
        print(f"{exc} (supported: {', '.join(supported_platforms())})", file=sys.stderr)
        return 2

    async with client:
        if args.command == "status":
            print(client.session_state().value)
            return 0

        if args.command == "logout":
            await client.logout()
            print("Logged out")
            return 0

        if args.command == "register-biometric":
            result = await client.register_biometric()
            print("Biometric registered" if result.ok else f"Biometric register failed: {result.detail}")
            return 0 if result.ok else 1

        password = getpass.getpass("Password: ")
        try:
            if args.command == "login":
                await client.login(args.email, password)
            else:
                confirm = getpass.getpass("Confirm password: ")
                await client.register(args.email, password, confirm)
        except AuthError as exc:
            print(f"{args.command.capitalize()} failed: {exc}", file=sys.stderr)
            return 1
        print("Logged in")
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Biometric session client")
    sub = parser.add_subparsers(dest="command", required=True)
    for name in ("login", "register"):
        cmd = sub.add_parser(name)
        cmd.add_argument("email")
    for name in ("logout", "status", "register-biometric"):
        sub.add_parser(name)

    args = parser.parse_args(argv)
    configure_logging(config.debug)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
