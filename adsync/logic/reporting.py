"""Spreadsheet reporting for shop metrics and snapshots."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

import pendulum

from adsync.errors import AdsyncError, ConfigError
from adsync.ingest.models import AggregateMetrics, ItemMetrics, Shop
from adsync.sheets.client import Grid, SheetsClient
from adsync.utils.dates import clock_minute

logger = logging.getLogger(__name__)


def to_major_units(value: int | float) -> float:
    return value / 100


def totals_rows(metrics: AggregateMetrics) -> Grid:
    return [
        [to_major_units(metrics.spending)],
        [metrics.impressions],
        [metrics.views],
        [metrics.contacts],
    ]


def item_row(item: ItemMetrics) -> list[Any]:
    # Columns 8-9 (conversions) and 11-13 (hourly diffs) are placeholders.
    return [
        item.link,
        item.title,
        item.id,
        item.impressions,
        item.views,
        item.contacts,
        to_major_units(item.spending),
        0,
        0,
        item.cost_per_contact,
        0,
        0,
        0,
        item.bid_penny,
    ]


def transpose(values: Sequence[Sequence[Any]]) -> Grid:
    """Swap rows and columns, padding short rows with empty strings."""
    if not values:
        return []
    width = max(len(row) for row in values)
    return [[row[i] if i < len(row) else "" for row in values] for i in range(width)]


class ReportingRepository:
    def __init__(self, shops: Iterable[Shop], sheets: SheetsClient) -> None:
        self.shops = list(shops)
        self.sheets = sheets

    def shop_range(self, shop_name: str) -> str:
        for shop in self.shops:
            if shop.name == shop_name:
                return shop.sheet_range
        raise ConfigError(f"sheet range not found for shop {shop_name}")

    def update_shop_totals(self, shop_name: str, metrics: AggregateMetrics) -> None:
        write_range = self.shop_range(shop_name)
        self.sheets.update_range(write_range, totals_rows(metrics))
        logger.debug("Wrote totals for %s to %s", shop_name, write_range)

    def update_shop_items(self, shop: Shop, items: Sequence[ItemMetrics]) -> None:
        write_range = shop.items_range or shop.sheet_range
        rows = [item_row(item) for item in items]
        self.sheets.update_range(write_range, rows)
        logger.info("Wrote %s item rows for %s to %s", len(rows), shop.name, write_range)

    def save_due_snapshots(self, now: pendulum.DateTime | None = None) -> dict[str, Grid]:
        current = clock_minute(now)
        updates: dict[str, Grid] = {}
        for shop in self.shops:
            for snapshot in shop.snapshots:
                if snapshot.time_of_day != current:
                    continue
                try:
                    values = self.sheets.read_range(shop.sheet_range)
                except AdsyncError as exc:
                    logger.error("Failed to read %s for %s: %s", shop.sheet_range, shop.name, exc)
                    continue
                updates[snapshot.target_range] = transpose(values)
        if not updates:
            return updates
        self.sheets.batch_update(updates)
        logger.info("Snapshots saved at %s: %s", current, sorted(updates))
        return updates

    def clear_all_snapshot_ranges(self) -> dict[str, Grid]:
        updates: dict[str, Grid] = {
            snapshot.target_range: [] for shop in self.shops for snapshot in shop.snapshots
        }
        if not updates:
            return updates
        self.sheets.batch_update(updates)
        logger.info("Cleared %s snapshot ranges", len(updates))
        return updates
