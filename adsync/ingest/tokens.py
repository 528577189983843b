"""Per-credential access token cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import httpx
import pendulum

from adsync.errors import AdsyncError, AuthError
from adsync.ingest.http import request_json
from adsync.ingest.models import Credential

logger = logging.getLogger(__name__)

REFRESH_MARGIN = pendulum.duration(minutes=5)


@dataclass(slots=True)
class CachedToken:
    token: str
    expires_at: pendulum.DateTime


class TokenCache:
    """Client-credentials tokens keyed by ``client_id``.

    A token is refreshed when missing, empty or within five minutes of expiry.
    A failed refresh leaves the previous entry in place so the next call tries
    again. Concurrent refreshes for one credential are not deduplicated; the
    last successful write wins.
    """

    def __init__(
        self,
        token_url: str,
        *,
        clock: Callable[[], pendulum.DateTime] = pendulum.now,
    ) -> None:
        self.token_url = token_url
        self._clock = clock
        self._tokens: dict[str, CachedToken] = {}

    async def get_token(self, credential: Credential, session: httpx.AsyncClient) -> str:
        cached = self._tokens.get(credential.client_id)
        if cached is None or not cached.token or self._clock() >= cached.expires_at - REFRESH_MARGIN:
            cached = await self._refresh(credential, session)
        return cached.token

    def invalidate(self, client_id: str) -> None:
        self._tokens.pop(client_id, None)

    async def _refresh(self, credential: Credential, session: httpx.AsyncClient) -> CachedToken:
        form = {
            "grant_type": "client_credentials",
            "client_id": credential.client_id,
            "client_secret": credential.client_secret,
        }
        try:
            data = await request_json(session, "POST", self.token_url, data=form)
        except AdsyncError as exc:
            logger.error("Failed to refresh token for %s: %s", credential.client_id, exc)
            raise AuthError(f"Token exchange failed for {credential.client_id}: {exc}") from exc
        try:
            cached = CachedToken(
                token=data["access_token"],
                expires_at=self._clock().add(seconds=int(data["expires_in"])),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthError(f"Malformed token response for {credential.client_id}") from exc
        self._tokens[credential.client_id] = cached
        logger.debug("Token refreshed for %s, expires %s", credential.client_id, cached.expires_at)
        return cached
