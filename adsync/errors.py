"""Error types raised across the metrics pipeline."""

from __future__ import annotations


class AdsyncError(RuntimeError):
    pass


class AuthError(AdsyncError):
    """Token exchange failed."""


class TransportError(AdsyncError):
    """Network or connection failure talking to the upstream API."""


class UpstreamStatusError(AdsyncError):
    def __init__(self, status_code: int, status_text: str, url: str = "") -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.url = url
        super().__init__(f"bad status: {status_code} {status_text}".rstrip())


class DecodeError(AdsyncError):
    """Upstream response body could not be decoded."""


class ConfigError(AdsyncError):
    pass


class SinkError(AdsyncError):
    """Spreadsheet read or write failed."""
