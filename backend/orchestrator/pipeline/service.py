"""
PipelineService: the facade HTTP routes and Celery tasks call into.

It owns no state of its own; everything durable lives in the RunStore
and everything asynchronous goes through the TaskScheduler.
"""

from __future__ import annotations

from typing import Any, Mapping, assert_never

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orchestrator.core.config import settings
from orchestrator.core.constants import TaskKind
from orchestrator.core.logging import get_logger
from orchestrator.pipeline.catalog import PipelineCatalog, default_catalog
from orchestrator.pipeline.delegator import AgentDelegator
from orchestrator.pipeline.errors import RunNotFoundError
from orchestrator.pipeline.executor import StepExecutor
from orchestrator.pipeline.models import Run, StepResult
from orchestrator.pipeline.run_store import RunStore
from orchestrator.pipeline.scheduler import TaskScheduler

logger = get_logger(__name__)


class PipelineService:
    """Entry points for listing, triggering and continuing pipelines."""

    def __init__(
        self,
        catalog: PipelineCatalog,
        store: RunStore,
        delegator: AgentDelegator,
        scheduler: TaskScheduler,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.delegator = delegator
        self.scheduler = scheduler
        self.executor = StepExecutor(store, delegator, scheduler, catalog)

    # ─── Queries ──────────────────────────────

    def list_pipelines(self) -> list[dict[str, Any]]:
        return [p.summary() for p in self.catalog]

    async def get_run(self, run_id: str) -> Run:
        run = await self.store.get(run_id)
        if run is None:
            raise RunNotFoundError(run_id)
        return run

    async def list_runs(self, limit: int = settings.RECENT_RUNS_LIMIT) -> list[Run]:
        return await self.store.list_recent(limit)

    # ─── Commands ─────────────────────────────

    async def trigger(self, pipeline_id: str) -> str:
        """
        Create a run and queue its first step; returns the run id at once.

        Raises:
            PipelineNotFoundError: If pipeline_id is not in the catalog.
        """
        pipeline = self.catalog.get(pipeline_id)
        run_id = await self.store.create(pipeline.id)
        log = logger.bind(run_id=run_id, pipeline_id=pipeline.id)

        try:
            self.scheduler.schedule(TaskKind.RUN_PIPELINE, {"run_id": run_id})
        except Exception as exc:
            log.error("Run not scheduled, failing run", error=str(exc))
            await self.store.fail(
                run_id,
                f"{pipeline.id} failed: could not schedule run: {exc}",
                expected_version=0,
            )
            raise

        log.info("Pipeline triggered")
        return run_id

    async def start(self, run_id: str) -> StepResult | None:
        """Execute step 0 of a freshly created run; no-op once it has moved."""
        run = await self.get_run(run_id)
        if not run.is_running or run.version != 0:
            logger.info(
                "Start ignored, run already started or finished",
                run_id=run_id,
                status=run.status.value,
                version=run.version,
            )
            return None

        pipeline = self.catalog.get(run.pipeline_id)
        logger.info("Pipeline started", run_id=run_id, pipeline_id=pipeline.id, steps=len(pipeline.steps))
        return await self.executor.advance(run.id, pipeline, 0, (), version=run.version)

    async def run_pipeline(self, pipeline_id: str) -> str:
        """Create a run and execute its first step in this process."""
        pipeline = self.catalog.get(pipeline_id)
        run_id = await self.store.create(pipeline.id)
        await self.start(run_id)
        return run_id

    async def resume(self, run_id: str) -> StepResult | None:
        return await self.executor.resume(run_id)

    async def delegate(
        self,
        agent: str,
        task_name: str,
        params: Any = None,
        *,
        run_id: str | None = None,
    ) -> StepResult:
        """Ad hoc delegation outside any pipeline step; always recorded."""
        result = await self.delegator.delegate(agent, task_name, params)
        await self.store.record_delegation(
            agent=agent,
            task_name=task_name,
            payload=params,
            result=result,
            run_id=run_id,
        )
        return result

    async def trigger_scheduled(self, cron: str) -> list[str]:
        """Trigger every pipeline whose schedule is exactly `cron`."""
        pipelines = self.catalog.for_schedule(cron)
        if not pipelines:
            logger.info("No pipelines for schedule", cron=cron)
            return []
        return [await self.trigger(p.id) for p in pipelines]

    # ─── Task dispatch ────────────────────────

    async def dispatch(self, kind: TaskKind, payload: Mapping[str, Any]) -> Any:
        """Route one unit of scheduled work to its handler."""
        match kind:
            case TaskKind.RUN_PIPELINE:
                if payload.get("run_id"):
                    return await self.start(payload["run_id"])
                return await self.run_pipeline(payload["pipeline_id"])
            case TaskKind.CONTINUE_PIPELINE:
                return await self.resume(payload["run_id"])
            case TaskKind.DELEGATE_TASK:
                return await self.delegate(
                    payload["agent_type"],
                    payload["task_name"],
                    payload.get("params"),
                    run_id=payload.get("run_id"),
                )
            case _:
                assert_never(kind)


def build_service(
    session_factory: async_sessionmaker[AsyncSession],
    scheduler: TaskScheduler,
    *,
    catalog: PipelineCatalog | None = None,
    delegator: AgentDelegator | None = None,
) -> PipelineService:
    """Wire a service from settings, overriding parts where given."""
    return PipelineService(
        catalog=catalog or default_catalog(),
        store=RunStore(session_factory),
        delegator=delegator or AgentDelegator(
            settings.agent_endpoints,
            timeout=settings.DELEGATION_TIMEOUT_SECONDS,
        ),
        scheduler=scheduler,
    )
