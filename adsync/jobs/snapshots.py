"""Snapshot save and clear jobs."""

from __future__ import annotations

import logging

import pendulum
from dotenv import load_dotenv

from adsync.errors import AdsyncError
from adsync.ingest import load_settings
from adsync.logic.reporting import ReportingRepository
from adsync.sheets.client import create_sheets_client_from_env

logger = logging.getLogger(__name__)


def _repository() -> ReportingRepository:
    load_dotenv()
    settings = load_settings()
    return ReportingRepository(settings.shops, create_sheets_client_from_env(settings.spreadsheet_id))


def save_snapshots(now: pendulum.DateTime | None = None, repository: ReportingRepository | None = None) -> None:
    repository = repository or _repository()
    try:
        repository.save_due_snapshots(now)
    except AdsyncError as exc:
        logger.error("Failed to write snapshots: %s", exc)


def clear_snapshots(repository: ReportingRepository | None = None) -> None:
    repository = repository or _repository()
    logger.info("Clearing all snapshot ranges")
    try:
        repository.clear_all_snapshot_ranges()
    except AdsyncError as exc:
        logger.error("Failed to clear snapshot ranges: %s", exc)


if __name__ == "__main__":
    save_snapshots()
