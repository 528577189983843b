"""Celery configuration for scheduled jobs."""

from __future__ import annotations

import os
from datetime import timedelta

from celery import Celery
from celery.schedules import crontab
from celery.signals import worker_ready

from adsync.utils.dates import timezone_name

broker_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
backend_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
cycle_interval = timedelta(minutes=int(os.environ.get("CYCLE_INTERVAL_MINUTES", "10")))

celery_app = Celery("adsync", broker=broker_url, backend=backend_url)
celery_app.conf.timezone = timezone_name()
celery_app.conf.beat_schedule = {
    "shop-cycle": {
        "task": "adsync.jobs.cycle.run_cycle",
        "schedule": cycle_interval,
    },
    "items-report": {
        "task": "adsync.jobs.cycle.run_items_report",
        "schedule": crontab(minute=0),
    },
    "snapshot-save": {
        "task": "adsync.jobs.snapshots.save_snapshots",
        "schedule": crontab(),
    },
    "snapshot-clear": {
        "task": "adsync.jobs.snapshots.clear_snapshots",
        "schedule": crontab(hour=0, minute=0),
    },
}


@celery_app.task(name="adsync.jobs.cycle.run_cycle")
def run_cycle_task():  # pragma: no cover - executed by worker
    import asyncio

    from adsync.jobs.cycle import run_cycle

    asyncio.run(run_cycle())


@celery_app.task(name="adsync.jobs.cycle.run_items_report")
def run_items_report_task():  # pragma: no cover - executed by worker
    import asyncio

    from adsync.jobs.cycle import run_items_report

    asyncio.run(run_items_report())


@celery_app.task(name="adsync.jobs.snapshots.save_snapshots")
def save_snapshots_task():  # pragma: no cover - executed by worker
    from adsync.jobs.snapshots import save_snapshots

    save_snapshots()


@celery_app.task(name="adsync.jobs.snapshots.clear_snapshots")
def clear_snapshots_task():  # pragma: no cover - executed by worker
    from adsync.jobs.snapshots import clear_snapshots

    clear_snapshots()


@worker_ready.connect
def run_cycle_on_start(sender=None, **kwargs):  # pragma: no cover - executed by worker
    run_cycle_task.delay()
