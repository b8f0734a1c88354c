"""
Celery tasks: pipeline runs, continuations and ad hoc delegations.

Every task runs one coroutine with asyncio.run() against a FRESH engine,
then disposes it, so no pooled connection outlives its event loop.
"""

import asyncio
from typing import Any

import structlog

from orchestrator.core.constants import TASK_NAMES, TRIGGER_SCHEDULED_TASK, TaskKind
from orchestrator.db.session import make_session
from orchestrator.pipeline.models import StepResult
from orchestrator.pipeline.scheduler import CeleryTaskScheduler
from orchestrator.pipeline.service import build_service
from orchestrator.tasks import celery_app

logger = structlog.get_logger("tasks.pipelines")


async def _with_service(fn):
    """Run `fn(service)` with a service bound to a fresh engine."""
    factory, engine = make_session()
    try:
        service = build_service(factory, CeleryTaskScheduler(celery_app))
        return await fn(service)
    finally:
        await engine.dispose()


def _dispatch(kind: TaskKind, payload: dict[str, Any]) -> Any:
    return asyncio.run(_with_service(lambda service: service.dispatch(kind, payload)))


def _result_payload(result: StepResult | None) -> dict[str, Any] | None:
    return result.to_dict() if result is not None else None


@celery_app.task(bind=True, name=TASK_NAMES[TaskKind.RUN_PIPELINE])
def run_pipeline(self, run_id: str | None = None, pipeline_id: str | None = None):
    """
    Start a pipeline run.

    With run_id, executes step 0 of a run created by a trigger.  With only
    pipeline_id, creates the run first.
    """
    task_log = logger.bind(task_id=self.request.id, run_id=run_id, pipeline_id=pipeline_id)
    if not run_id and not pipeline_id:
        raise ValueError("run_pipeline requires run_id or pipeline_id")

    task_log.info("Run task started")
    try:
        result = _dispatch(TaskKind.RUN_PIPELINE, {"run_id": run_id, "pipeline_id": pipeline_id})
    except Exception as exc:
        task_log.exception("Run task failed", error=str(exc))
        raise

    if isinstance(result, str):
        return {"run_id": result}
    return {"run_id": run_id, "result": _result_payload(result)}


@celery_app.task(bind=True, name=TASK_NAMES[TaskKind.CONTINUE_PIPELINE])
def continue_pipeline(self, run_id: str):
    """Advance a run to its next step."""
    task_log = logger.bind(task_id=self.request.id, run_id=run_id)
    try:
        result = _dispatch(TaskKind.CONTINUE_PIPELINE, {"run_id": run_id})
    except Exception as exc:
        task_log.exception("Continuation task failed", error=str(exc))
        raise

    task_log.info("Continuation task finished", advanced=result is not None)
    return {"run_id": run_id, "result": _result_payload(result)}


@celery_app.task(bind=True, name=TASK_NAMES[TaskKind.DELEGATE_TASK])
def delegate_task(
    self,
    agent_type: str,
    task_name: str,
    params: dict | None = None,
    run_id: str | None = None,
):
    """Hand a single task to a worker agent outside any pipeline step."""
    task_log = logger.bind(task_id=self.request.id, agent=agent_type, task=task_name)
    result = _dispatch(
        TaskKind.DELEGATE_TASK,
        {"agent_type": agent_type, "task_name": task_name, "params": params, "run_id": run_id},
    )
    task_log.info("Delegation task finished", success=result.success)
    return result.to_dict()


@celery_app.task(bind=True, name=TRIGGER_SCHEDULED_TASK)
def trigger_scheduled(self, cron: str):
    """Beat entry point: trigger every pipeline declaring `cron`."""
    task_log = logger.bind(task_id=self.request.id, cron=cron)
    run_ids = asyncio.run(_with_service(lambda service: service.trigger_scheduled(cron)))
    task_log.info("Scheduled pipelines triggered", runs=len(run_ids))
    return {"cron": cron, "run_ids": run_ids}
