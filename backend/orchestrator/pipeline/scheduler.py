"""
Hands units of work to the task substrate.

The executor and service only know the TaskScheduler protocol; in
production that is Celery, addressed by registered task name so this
module never imports the task modules themselves.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from celery import Celery

from orchestrator.core.constants import TASK_NAMES, TaskKind
from orchestrator.core.logging import get_logger

logger = get_logger(__name__)


class TaskScheduler(Protocol):
    def schedule(self, kind: TaskKind, payload: Mapping[str, Any]) -> None: ...


class CeleryTaskScheduler:
    """Enqueues orchestrator tasks on a Celery broker."""

    def __init__(self, celery_app: Celery) -> None:
        self._app = celery_app

    def schedule(self, kind: TaskKind, payload: Mapping[str, Any]) -> None:
        task_name = TASK_NAMES[kind]
        async_result = self._app.send_task(task_name, kwargs=dict(payload))
        logger.info(
            "Task scheduled",
            kind=kind.value,
            task=task_name,
            celery_task_id=async_result.id,
            run_id=payload.get("run_id"),
        )
