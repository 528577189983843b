"""Ingestion helpers."""

from __future__ import annotations

import os
import pathlib
import re
from datetime import datetime
from typing import Any

import yaml

from adsync.errors import ConfigError
from adsync.ingest.models import Credential, Settings, Shop, SnapshotSpec

DEFAULT_CONFIG_PATH = pathlib.Path(__file__).with_name("shops.yml")
DEFAULT_API_URL = "https://api.avito.ru"
UNSET_VAR_RE = re.compile(r"\$\{(\w+)\}")


def config_path() -> pathlib.Path:
    return pathlib.Path(os.environ.get("SHOPS_CONFIG", DEFAULT_CONFIG_PATH))


def load_settings(path: pathlib.Path | None = None) -> Settings:
    path = path or config_path()
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    data = _expand_env(data or {})
    urls = data.get("urls") or {}
    try:
        return Settings(
            spreadsheet_id=str(data["spreadsheet_id"]),
            token_url=urls["token_url"],
            metrics_url=urls["metrics_url"],
            api_url=urls.get("api_url", DEFAULT_API_URL),
            shops=tuple(_parse_shop(item) for item in data.get("shops") or []),
        )
    except KeyError as exc:
        raise ConfigError(f"Missing config key {exc} in {path}") from exc
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc


def load_shops(limit: int | None = None) -> list[Shop]:
    shops = list(load_settings().shops)
    if limit:
        return shops[:limit]
    return shops


def _parse_shop(item: dict[str, Any]) -> Shop:
    name = item["name"]
    snapshots = tuple(
        SnapshotSpec(time_of_day=_normalize_time(snap["time"], name), target_range=snap["range"])
        for snap in item.get("snapshots") or []
    )
    return Shop(
        name=name,
        credential=Credential(client_id=str(item["client_id"]), client_secret=str(item["client_secret"])),
        user_id=int(item["user_id"]),
        sheet_range=item["sheet_range"],
        snapshots=snapshots,
        items_range=item.get("items_range"),
    )


def _normalize_time(value: Any, shop_name: str) -> str:
    try:
        return datetime.strptime(str(value), "%H:%M").strftime("%H:%M")
    except ValueError as exc:
        raise ConfigError(f"Invalid snapshot time {value!r} for shop {shop_name}") from exc


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        expanded = os.path.expandvars(value)
        missing = UNSET_VAR_RE.search(expanded)
        if missing:
            raise ConfigError(f"Environment variable {missing.group(1)} is not set")
        return expanded
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    return value
