"""Avito advertising statistics ingestion."""

from __future__ import annotations

import logging
from typing import Any, Iterator

import httpx

from adsync.errors import DecodeError
from adsync.ingest.http import bearer, request_json
from adsync.ingest.models import AggregateMetrics, Credential, Item, ItemMetrics
from adsync.ingest.tokens import TokenCache
from adsync.utils.dates import format_date, today_in_tz

logger = logging.getLogger(__name__)

TOTALS_METRICS = [
    "views",
    "contacts",
    "impressions",
    "spending",
    "clickPackages",
    "impressionsToViewsConversion",
    "viewsToContactsConversion",
]
ITEM_METRICS = ["views", "contacts", "impressions", "spending"]

PAGE_SIZE = 100
BID_BATCH_SIZE = 200
METRICS_LIMIT = 1000


class AvitoClient:
    def __init__(
        self,
        token_url: str,
        metrics_url: str,
        api_url: str = "https://api.avito.ru",
        *,
        session: httpx.AsyncClient | None = None,
        tokens: TokenCache | None = None,
    ) -> None:
        self.metrics_url = metrics_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self.session = session or httpx.AsyncClient(timeout=30.0)
        self.tokens = tokens or TokenCache(token_url)

    async def close(self) -> None:
        await self.session.aclose()

    async def get_aggregate_metrics(self, user_id: int, credential: Credential) -> AggregateMetrics:
        token = await self.tokens.get_token(credential, self.session)
        data = await self._fetch_stats(user_id, token, grouping="totals", metrics=TOTALS_METRICS)
        values: dict[str, Any] = {}
        for _, metrics in _groupings(data):
            values.update(metrics)
        return AggregateMetrics(
            spending=values.get("spending", 0),
            impressions=values.get("impressions", 0),
            contacts=values.get("contacts", 0),
            views=values.get("views", 0),
            impressions_to_views_conversion=values.get("impressionsToViewsConversion", 0),
            views_to_contacts_conversion=values.get("viewsToContactsConversion", 0),
        )

    async def get_item_metrics(self, user_id: int, credential: Credential) -> list[ItemMetrics]:
        logger.info("Fetching item metrics for user %s", user_id)
        token = await self.tokens.get_token(credential, self.session)

        items = await self._list_active_items(token)
        if not items:
            logger.warning("No active items for user %s", user_id)
            return []

        data = await self._fetch_stats(user_id, token, grouping="item", metrics=ITEM_METRICS)
        by_id: dict[Any, dict[str, Any]] = {}
        for grouping_id, metrics in _groupings(data):
            by_id.setdefault(grouping_id, metrics)
        logger.info("Item metrics fetched: %s groupings", len(by_id))

        bids = await self._fetch_bids(token, [item.id for item in items])

        result: list[ItemMetrics] = []
        missing: list[int] = []
        for item in items:
            values = by_id.get(item.id)
            if values is None:
                missing.append(item.id)
                values = {}
            contacts = values.get("contacts", 0)
            spending = values.get("spending", 0)
            result.append(
                ItemMetrics(
                    id=item.id,
                    link=item.url,
                    title=item.title,
                    impressions=values.get("impressions", 0),
                    views=values.get("views", 0),
                    contacts=contacts,
                    spending=spending,
                    bid_penny=bids.get(item.id, 0),
                    cost_per_contact=spending / contacts if contacts > 0 else 0.0,
                )
            )
        if missing:
            logger.warning("Metrics not found for %s of %s items: %s", len(missing), len(items), missing)
        logger.info("Prepared metrics for %s items of user %s", len(result), user_id)
        return result

    async def _fetch_stats(self, user_id: int, token: str, *, grouping: str, metrics: list[str]) -> dict[str, Any]:
        today = format_date(today_in_tz())
        payload = {
            "dateFrom": today,
            "dateTo": today,
            "grouping": grouping,
            "limit": METRICS_LIMIT,
            "offset": 0,
            "metrics": metrics,
        }
        url = f"{self.metrics_url}/{user_id}/items"
        return await request_json(self.session, "POST", url, json=payload, headers=bearer(token))

    async def _list_active_items(self, token: str) -> list[Item]:
        items: list[Item] = []
        page = 1
        while True:
            params = {"status": "active", "per_page": PAGE_SIZE, "page": page}
            data = await request_json(
                self.session, "GET", f"{self.api_url}/core/v1/items", params=params, headers=bearer(token)
            )
            resources = _field(data, "resources")
            try:
                items.extend(Item(id=r["id"], title=r.get("title", ""), url=r.get("url", "")) for r in resources)
            except (KeyError, TypeError, AttributeError) as exc:
                raise DecodeError(f"Malformed items page {page}") from exc
            logger.info("Items page %s fetched: %s", page, len(resources))
            if len(resources) < PAGE_SIZE:
                break
            page += 1
        logger.info("Active items fetched: %s", len(items))
        return items

    async def _fetch_bids(self, token: str, item_ids: list[int]) -> dict[int, int]:
        bids: dict[int, int] = {}
        url = f"{self.api_url}/cpxpromo/1/getPromotionsByItemIds"
        for batch in _chunks(item_ids, BID_BATCH_SIZE):
            data = await request_json(self.session, "POST", url, json={"itemIDs": batch}, headers=bearer(token))
            try:
                for entry in _field(data, "items"):
                    promotion = entry.get("manualPromotion") or {}
                    bids[entry["itemID"]] = promotion.get("bidPenny") or 0
            except (KeyError, TypeError, AttributeError) as exc:
                raise DecodeError("Malformed promotions response") from exc
            logger.debug("Bid batch of %s decoded", len(batch))
        logger.info("Bids fetched: %s", len(bids))
        return bids


def _chunks(values: list[int], size: int) -> Iterator[list[int]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


def _field(data: Any, key: str) -> list[Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"Expected an object with {key!r}")
    return data.get(key) or []


def _groupings(data: Any) -> list[tuple[Any, dict[str, Any]]]:
    """Decode metric groupings into (id, slug -> value) pairs."""
    try:
        groupings = (data.get("result") or {}).get("groupings") or []
        return [(grouping.get("id"), _metric_map(grouping)) for grouping in groupings]
    except (KeyError, TypeError, AttributeError) as exc:
        raise DecodeError("Malformed metrics response") from exc


def _metric_map(grouping: dict[str, Any]) -> dict[str, int | float]:
    values: dict[str, int | float] = {}
    for metric in grouping.get("metrics") or []:
        value = metric.get("value")
        if value is None:
            value = 0
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"Non-numeric value for metric {metric['slug']!r}: {value!r}")
        values[metric["slug"]] = value
    return values
