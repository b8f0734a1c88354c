"""
Celery Beat schedule derived from the pipeline catalog.

One beat entry per distinct cron string; each entry fires
trigger_scheduled(cron), which starts every pipeline declaring exactly
that schedule.
"""

from __future__ import annotations

from typing import Any

from celery.schedules import crontab

from orchestrator.core.constants import TRIGGER_SCHEDULED_TASK
from orchestrator.pipeline.catalog import PipelineCatalog


def cron_to_crontab(cron: str) -> crontab:
    """Convert a 5-field cron string into a celery crontab."""
    minute, hour, day_of_month, month_of_year, day_of_week = cron.split()
    return crontab(
        minute=minute,
        hour=hour,
        day_of_month=day_of_month,
        month_of_year=month_of_year,
        day_of_week=day_of_week,
    )


def build_beat_schedule(catalog: PipelineCatalog) -> dict[str, dict[str, Any]]:
    schedule: dict[str, dict[str, Any]] = {}
    for cron in catalog.schedules():
        schedule[f"pipelines:{cron}"] = {
            "task": TRIGGER_SCHEDULED_TASK,
            "schedule": cron_to_crontab(cron),
            "kwargs": {"cron": cron},
        }
    return schedule
