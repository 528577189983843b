"""Shared request helper mapping httpx failures onto pipeline errors."""

from __future__ import annotations

from typing import Any

import httpx

from adsync.errors import DecodeError, TransportError, UpstreamStatusError


async def request_json(session: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> Any:
    try:
        response = await session.request(method, url, **kwargs)
    except httpx.RequestError as exc:
        raise TransportError(f"{method} {url} failed: {exc}") from exc
    if not response.is_success:
        raise UpstreamStatusError(response.status_code, response.reason_phrase, url)
    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON from {url}: {exc}") from exc


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
