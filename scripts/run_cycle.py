"""Run one shop cycle (or the item report) outside of Celery."""

from __future__ import annotations

import asyncio
import logging
import sys

from dotenv import load_dotenv

from adsync.ingest import load_settings
from adsync.jobs.cycle import build_runner


async def main(items: bool = False) -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    runner = build_runner(load_settings())
    try:
        report = await (runner.run_items_report() if items else runner.run_cycle())
    finally:
        await runner.client.close()
    print("Succeeded:", ", ".join(report.succeeded) or "-")
    print("Failed:", ", ".join(report.failed) or "-")
    if report.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    asyncio.run(main(items="--items" in sys.argv[1:]))
