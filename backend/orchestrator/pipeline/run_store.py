"""
RunStore: durable run state in pipeline_runs, plus the delegation audit
trail in delegated_tasks.

Store rules:
- Every update filters on status == running, so a terminal run is never
  written again.
- Step claims and result writes are compare-and-swap on `version`; the
  boolean return says whether this caller won.
- Each public method opens and commits its own short transaction.
"""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orchestrator.core.constants import DelegatedTaskStatus, RunStatus
from orchestrator.core.logging import get_logger
from orchestrator.db.models.base import utcnow
from orchestrator.db.models.delegated_task import DelegatedTask
from orchestrator.db.models.pipeline_run import PipelineRun
from orchestrator.pipeline.models import Run, StepResult

logger = get_logger(__name__)


def _to_run(row: PipelineRun) -> Run:
    return Run(
        id=row.id,
        pipeline_id=row.pipeline_id,
        status=RunStatus(row.status),
        current_step=row.current_step,
        results=tuple(StepResult.from_dict(r) for r in (row.results or [])),
        started_at=row.started_at,
        completed_at=row.completed_at,
        error=row.error,
        version=row.version,
    )


def _serialise(results: Sequence[StepResult]) -> list[dict[str, Any]]:
    return [r.to_dict() for r in results]


class RunStore:
    """Data access for pipeline runs and delegated task records."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ─── Reads ────────────────────────────────

    async def get(self, run_id: str) -> Run | None:
        async with self._session_factory() as session:
            row = await session.get(PipelineRun, run_id)
            return _to_run(row) if row is not None else None

    async def list_recent(self, limit: int) -> list[Run]:
        """Most recently started runs first."""
        stmt = (
            select(PipelineRun)
            .order_by(PipelineRun.started_at.desc())
            .limit(limit)
        )
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [_to_run(row) for row in rows]

    # ─── Writes ───────────────────────────────

    async def create(self, pipeline_id: str) -> str:
        """Insert a new running run at step 0 and return its id."""
        async with self._session_factory() as session:
            async with session.begin():
                row = PipelineRun(
                    pipeline_id=pipeline_id,
                    status=RunStatus.RUNNING.value,
                    current_step=0,
                    version=0,
                    results=[],
                    started_at=utcnow(),
                )
                session.add(row)
                await session.flush()
                run_id = row.id

        logger.info("Run created", run_id=run_id, pipeline_id=pipeline_id)
        return run_id

    async def set_current_step(
        self,
        run_id: str,
        index: int,
        *,
        expected_version: int,
    ) -> bool:
        """
        Claim step `index` for execution.

        Succeeds only if the run is still running, nobody has moved its
        version since it was read, and the index does not go backwards.
        """
        return await self._update(
            run_id,
            {"current_step": index},
            expected_version=expected_version,
            extra=(PipelineRun.current_step <= index,),
        )

    async def set_results(
        self,
        run_id: str,
        results: Sequence[StepResult],
        *,
        expected_version: int,
    ) -> bool:
        """Replace the accumulated results wholesale."""
        return await self._update(
            run_id,
            {"results": _serialise(results)},
            expected_version=expected_version,
        )

    async def complete(
        self,
        run_id: str,
        results: Sequence[StepResult],
        *,
        expected_version: int | None = None,
    ) -> bool:
        """Mark the run completed with its final results."""
        done = await self._update(
            run_id,
            {
                "status": RunStatus.COMPLETED.value,
                "results": _serialise(results),
                "completed_at": utcnow(),
            },
            expected_version=expected_version,
        )
        if done:
            logger.info("Run completed", run_id=run_id, steps=len(results))
        return done

    async def fail(
        self,
        run_id: str,
        message: str,
        *,
        expected_version: int | None = None,
    ) -> bool:
        """Mark the run failed with `message`."""
        done = await self._update(
            run_id,
            {
                "status": RunStatus.FAILED.value,
                "error": message,
                "completed_at": utcnow(),
            },
            expected_version=expected_version,
        )
        if done:
            logger.warning("Run failed", run_id=run_id, error=message)
        return done

    async def record_delegation(
        self,
        *,
        agent: str,
        task_name: str,
        payload: Any,
        result: StepResult,
        run_id: str | None = None,
    ) -> str:
        """Write one DelegatedTask audit row and return its id."""
        status = (
            DelegatedTaskStatus.COMPLETED if result.success else DelegatedTaskStatus.FAILED
        )
        async with self._session_factory() as session:
            async with session.begin():
                row = DelegatedTask(
                    run_id=run_id,
                    agent_type=agent,
                    task_name=task_name,
                    payload=payload if payload is not None else {},
                    status=status.value,
                    result=result.data,
                    error=result.error,
                    created_at=utcnow(),
                    completed_at=utcnow(),
                )
                session.add(row)
                await session.flush()
                return row.id

    # ─── Internals ────────────────────────────

    async def _update(
        self,
        run_id: str,
        values: dict[str, Any],
        *,
        expected_version: int | None,
        extra: tuple = (),
    ) -> bool:
        stmt = update(PipelineRun).where(
            PipelineRun.id == run_id,
            PipelineRun.status == RunStatus.RUNNING.value,
            *extra,
        )
        if expected_version is not None:
            stmt = stmt.where(PipelineRun.version == expected_version)
        stmt = stmt.values(**values, version=PipelineRun.version + 1).execution_options(
            synchronize_session=False
        )

        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(stmt)
                won = result.rowcount == 1

        if not won:
            logger.debug(
                "Run update skipped",
                run_id=run_id,
                fields=sorted(values),
                expected_version=expected_version,
            )
        return won
