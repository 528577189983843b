"""Shop metrics cycle orchestration."""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass, field
from typing import Iterable

from dotenv import load_dotenv

from adsync.errors import AdsyncError
from adsync.ingest import load_settings
from adsync.ingest.avito import AvitoClient
from adsync.ingest.models import Settings, Shop
from adsync.ingest.tokens import TokenCache
from adsync.logic.reporting import ReportingRepository
from adsync.sheets.client import create_sheets_client_from_env
from adsync.utils.rate_limit import ShopThrottle

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CycleReport:
    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class CycleRunner:
    """Sequential sweep over configured shops.

    A failing shop is logged and skipped; the rest of the cycle continues.
    Shops are separated by ``throttle.pause()`` to stay under the upstream
    rate limit.
    """

    def __init__(
        self,
        shops: Iterable[Shop],
        client: AvitoClient,
        repository: ReportingRepository,
        *,
        throttle: ShopThrottle | None = None,
    ) -> None:
        self.shops = list(shops)
        self.client = client
        self.repository = repository
        self.throttle = throttle or ShopThrottle()

    async def run_cycle(self) -> CycleReport:
        report = CycleReport()
        for index, shop in enumerate(self.shops):
            if index:
                await self.throttle.pause()
            ok = await self._process_totals(shop)
            (report.succeeded if ok else report.failed).append(shop.name)
        logger.info("Cycle finished: %s ok, %s failed %s", len(report.succeeded), len(report.failed), report.failed)
        return report

    async def run_items_report(self) -> CycleReport:
        report = CycleReport()
        shops = [shop for shop in self.shops if shop.items_range]
        for index, shop in enumerate(shops):
            if index:
                await self.throttle.pause()
            ok = await self._process_items(shop)
            (report.succeeded if ok else report.failed).append(shop.name)
        logger.info("Items report finished: %s ok, %s failed %s", len(report.succeeded), len(report.failed), report.failed)
        return report

    async def _process_totals(self, shop: Shop) -> bool:
        logger.info("Processing shop %s", shop.name)
        try:
            metrics = await self.client.get_aggregate_metrics(shop.user_id, shop.credential)
        except AdsyncError as exc:
            logger.error("Failed to get metrics for %s: %s", shop.name, exc)
            return False
        logger.info("Retrieved metrics for %s: %s", shop.name, metrics)
        try:
            await asyncio.get_running_loop().run_in_executor(
                None, self.repository.update_shop_totals, shop.name, metrics
            )
        except Exception:
            logger.exception("Failed to update sheet for %s", shop.name)
            return False
        logger.info("Updated sheet for %s", shop.name)
        return True

    async def _process_items(self, shop: Shop) -> bool:
        try:
            items = await self.client.get_item_metrics(shop.user_id, shop.credential)
        except AdsyncError as exc:
            logger.error("Failed to get item metrics for %s: %s", shop.name, exc)
            return False
        try:
            await asyncio.get_running_loop().run_in_executor(
                None, self.repository.update_shop_items, shop, items
            )
        except Exception:
            logger.exception("Failed to write item report for %s", shop.name)
            return False
        return True


@functools.lru_cache(maxsize=None)
def shared_token_cache(token_url: str) -> TokenCache:
    """Process-wide token cache so tokens outlive a single cycle."""
    return TokenCache(token_url)


def build_runner(settings: Settings) -> CycleRunner:
    client = AvitoClient(
        settings.token_url,
        settings.metrics_url,
        settings.api_url,
        tokens=shared_token_cache(settings.token_url),
    )
    sheets = create_sheets_client_from_env(settings.spreadsheet_id)
    return CycleRunner(settings.shops, client, ReportingRepository(settings.shops, sheets))


async def run_cycle() -> CycleReport:
    load_dotenv()
    runner = build_runner(load_settings())
    try:
        return await runner.run_cycle()
    finally:
        await runner.client.close()


async def run_items_report() -> CycleReport:
    load_dotenv()
    runner = build_runner(load_settings())
    try:
        return await runner.run_items_report()
    finally:
        await runner.client.close()


if __name__ == "__main__":
    asyncio.run(run_cycle())
