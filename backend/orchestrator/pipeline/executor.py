"""
StepExecutor: runs one step of a pipeline run, then hands off.

Each call to advance() executes at most one delegated step:

    1. Past the last step        -> complete the run
    2. Condition false           -> skip, try the next index in-process
    3. Claim the step (CAS)      -> lost claim means another delivery won
    4. Delegate, persist results, record the delegation
    5. Failure and not tolerated -> fail the run
    6. Otherwise                 -> schedule a continuation for the next step

A continuation calls resume(), which reloads the persisted run and
advances from current_step + 1.  Nothing here retries a delegation.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

import structlog

from orchestrator.core.constants import TaskKind
from orchestrator.core.logging import get_logger
from orchestrator.pipeline.catalog import PipelineCatalog
from orchestrator.pipeline.conditions import evaluate_condition
from orchestrator.pipeline.delegator import AgentDelegator
from orchestrator.pipeline.errors import ConditionError, RunNotFoundError, StepFailure
from orchestrator.pipeline.models import Pipeline, Run, StepResult
from orchestrator.pipeline.run_store import RunStore
from orchestrator.pipeline.scheduler import TaskScheduler

logger = get_logger(__name__)


class StepExecutor:
    """
    Advances persisted runs one step at a time.

    Usage::

        executor = StepExecutor(store, delegator, scheduler, catalog)
        await executor.advance(run_id, pipeline, 0, (), version=0)
        await executor.resume(run_id)   # from a continuation task
    """

    def __init__(
        self,
        store: RunStore,
        delegator: AgentDelegator,
        scheduler: TaskScheduler,
        catalog: PipelineCatalog,
    ) -> None:
        self.store = store
        self.delegator = delegator
        self.scheduler = scheduler
        self.catalog = catalog

    async def advance(
        self,
        run_id: str,
        pipeline: Pipeline,
        step_index: int,
        prior_results: Sequence[StepResult],
        *,
        version: int,
    ) -> StepResult | None:
        """
        Execute the step at `step_index` (or the next one whose condition
        holds) for a run last seen at `version`.

        Returns the step's result, the synthetic completion result, or
        None when the run was no longer ours to advance.
        """
        log = logger.bind(run_id=run_id, pipeline_id=pipeline.id)
        results = list(prior_results)
        index = step_index

        # ── Find the next step to execute ─────────────
        while True:
            if index >= len(pipeline.steps):
                return await self._complete(run_id, results, version, log)

            step = pipeline.steps[index]
            if step.condition is None:
                break

            try:
                should_run = evaluate_condition(step.condition, results)
            except ConditionError as exc:
                message = str(StepFailure(step.id, f"condition error: {exc}"))
                log.error("Step condition failed", step_id=step.id, error=str(exc))
                await self.store.fail(run_id, message, expected_version=version)
                return StepResult(success=False, error=message, step_id=step.id)

            if should_run:
                break

            log.info("Step skipped", step_id=step.id, step_index=index)
            index += 1

        step_log = log.bind(step_id=step.id, step_index=index, agent=step.agent.value)

        # ── Claim ─────────────────────────────────────
        if not await self.store.set_current_step(run_id, index, expected_version=version):
            step_log.info("Step claim lost, run already advanced or finished")
            return None
        version += 1

        # ── Delegate ──────────────────────────────────
        step_log.info("Step started", task=step.task)
        result = await self.delegator.delegate(step.agent.value, step.task, step.params)
        result = replace(result, step_id=step.id)
        results.append(result)

        await self.store.record_delegation(
            agent=step.agent.value,
            task_name=step.task,
            payload=step.params,
            result=result,
            run_id=run_id,
        )

        if not await self.store.set_results(run_id, results, expected_version=version):
            step_log.warning("Step result not persisted, run changed underneath")
            return None
        version += 1

        # ── Failure policy ────────────────────────────
        if not result.success:
            if not step.continue_on_error:
                message = str(StepFailure(step.id, result.error))
                step_log.warning("Step failed, aborting run", error=result.error)
                await self.store.fail(run_id, message, expected_version=version)
                return result
            step_log.warning("Step failed, continuing", error=result.error)
        else:
            step_log.info("Step succeeded", duration_ms=result.duration_ms)

        try:
            self.scheduler.schedule(TaskKind.CONTINUE_PIPELINE, {"run_id": run_id})
        except Exception as exc:
            message = str(StepFailure(step.id, f"could not schedule continuation: {exc}"))
            step_log.error("Continuation not scheduled, failing run", error=str(exc))
            await self.store.fail(run_id, message, expected_version=version)
        return result

    async def resume(self, run_id: str) -> StepResult | None:
        """
        Continue a run from the step after its persisted current_step.

        Raises:
            RunNotFoundError: If the run does not exist.
            PipelineNotFoundError: If its pipeline is no longer registered.
        """
        run = await self.store.get(run_id)
        if run is None:
            raise RunNotFoundError(run_id)

        log = logger.bind(run_id=run_id, pipeline_id=run.pipeline_id)
        if not run.is_running:
            log.info("Resume ignored, run is terminal", status=run.status.value)
            return None

        pipeline = self.catalog.get(run.pipeline_id)

        if _step_in_flight(run, pipeline):
            log.info("Resume ignored, current step has no result yet", step_index=run.current_step)
            return None

        return await self.advance(
            run.id,
            pipeline,
            run.current_step + 1,
            run.results,
            version=run.version,
        )

    async def _complete(
        self,
        run_id: str,
        results: list[StepResult],
        version: int,
        log: structlog.stdlib.BoundLogger,
    ) -> StepResult | None:
        if not await self.store.complete(run_id, results, expected_version=version):
            log.info("Completion skipped, run already finished or advanced")
            return None
        log.info("Pipeline completed", steps_executed=len(results))
        return StepResult(
            success=True,
            data={"completed": True, "results": [r.to_dict() for r in results]},
        )


def _step_in_flight(run: Run, pipeline: Pipeline) -> bool:
    """True when current_step was claimed but its result is not stored yet."""
    if run.current_step >= len(pipeline.steps):
        return False
    step_id = pipeline.steps[run.current_step].id
    return not any(r.step_id == step_id for r in run.results)
