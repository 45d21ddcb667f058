"""
Thin JSON-over-HTTP wrapper around ``httpx.AsyncClient`` for the auth API.

Status codes are *not* turned into exceptions here; callers decide what a
non-200 means.  Only transport failures raise (``httpx.HTTPError``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from auth.schemas import ErrorResponse
from config.settings import Settings

logger = logging.getLogger(__name__)


class AuthApi:
    """One HTTP client per session client; no process-wide instance."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            headers=dict(settings.default_headers),
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def post(
        self,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        *,
        token: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        response = await self._client.post(path, json=payload, headers=headers)
        logger.debug("POST %s → %d", path, response.status_code)
        return response

    async def aclose(self) -> None:
        await self._client.aclose()


def json_body(response: httpx.Response) -> Dict[str, Any]:
    """Decode a JSON object body; anything else becomes ``{}``."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def error_message(response: httpx.Response, default: str) -> str:
    """Server-supplied ``message`` field, or *default* when there is none."""
    try:
        message = ErrorResponse.model_validate(json_body(response)).message
    except ValidationError:
        return default
    return message if message and message.strip() else default
