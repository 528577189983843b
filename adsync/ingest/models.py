"""Ingestion data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Credential:
    client_id: str
    client_secret: str


@dataclass(frozen=True, slots=True)
class SnapshotSpec:
    time_of_day: str
    target_range: str


@dataclass(frozen=True, slots=True)
class Shop:
    name: str
    credential: Credential
    user_id: int
    sheet_range: str
    snapshots: tuple[SnapshotSpec, ...] = ()
    items_range: str | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    spreadsheet_id: str
    token_url: str
    metrics_url: str
    api_url: str
    shops: tuple[Shop, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class AggregateMetrics:
    spending: int = 0
    impressions: int = 0
    contacts: int = 0
    views: int = 0
    impressions_to_views_conversion: float = 0
    views_to_contacts_conversion: float = 0


@dataclass(slots=True)
class Item:
    id: int
    title: str
    url: str


@dataclass(slots=True)
class ItemMetrics:
    id: int
    link: str
    title: str
    impressions: int = 0
    views: int = 0
    contacts: int = 0
    spending: int = 0
    bid_penny: int = 0
    cost_per_contact: float = 0.0
