"""
PipelineCatalog: immutable registry of pipeline definitions.

Built once at startup from static definitions and passed to whatever
needs it (service, executor, beat schedule).  Lookup is by pipeline id or
by the exact cron string a pipeline declares as its schedule.

Construction validates every definition so a malformed pipeline fails the
process at startup rather than halfway through a run.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from orchestrator.core.constants import AgentType
from orchestrator.core.logging import get_logger
from orchestrator.pipeline.conditions import referenced_step
from orchestrator.pipeline.errors import CatalogError, PipelineNotFoundError
from orchestrator.pipeline.models import Pipeline
from orchestrator.pipeline.pipelines import DEFAULT_PIPELINES

logger = get_logger(__name__)

CRON_FIELDS = 5


def _validate(pipeline: Pipeline) -> None:
    if not pipeline.id:
        raise CatalogError("Pipeline id must be non-empty")
    if not pipeline.steps:
        raise CatalogError(f"Pipeline '{pipeline.id}' has no steps")
    if pipeline.schedule is not None and len(pipeline.schedule.split()) != CRON_FIELDS:
        raise CatalogError(
            f"Pipeline '{pipeline.id}' schedule must have {CRON_FIELDS} cron fields, "
            f"got {pipeline.schedule!r}"
        )

    seen: set[str] = set()
    for step in pipeline.steps:
        if not step.id or not step.task:
            raise CatalogError(f"Pipeline '{pipeline.id}' has a step without id or task")
        if step.id in seen:
            raise CatalogError(f"Pipeline '{pipeline.id}' has duplicate step id '{step.id}'")
        try:
            AgentType(step.agent)
        except ValueError:
            raise CatalogError(
                f"Step '{step.id}' in '{pipeline.id}' targets unknown agent '{step.agent}'"
            ) from None

        # Conditions can only look backwards.
        if step.condition is not None:
            ref = referenced_step(step.condition)
            if ref is not None and ref not in seen:
                raise CatalogError(
                    f"Step '{step.id}' in '{pipeline.id}' has a condition on "
                    f"'{ref}', which is not an earlier step"
                )
        seen.add(step.id)


class PipelineCatalog:
    """
    Read-only set of pipelines, kept in registration order.

    Usage::

        catalog = PipelineCatalog(DEFAULT_PIPELINES)
        catalog.get("daily-maintenance")
        catalog.for_schedule("0 4 * * *")
    """

    def __init__(self, pipelines: Iterable[Pipeline]) -> None:
        ordered = tuple(pipelines)
        by_id: dict[str, Pipeline] = {}
        for pipeline in ordered:
            _validate(pipeline)
            if pipeline.id in by_id:
                raise CatalogError(f"Duplicate pipeline id '{pipeline.id}'")
            by_id[pipeline.id] = pipeline

        self._pipelines = ordered
        self._by_id = by_id

    def __iter__(self) -> Iterator[Pipeline]:
        return iter(self._pipelines)

    def __len__(self) -> int:
        return len(self._pipelines)

    def get(self, pipeline_id: str) -> Pipeline:
        """
        Return the pipeline registered under pipeline_id.

        Raises:
            PipelineNotFoundError: If no such pipeline exists.
        """
        pipeline = self._by_id.get(pipeline_id)
        if pipeline is None:
            raise PipelineNotFoundError(pipeline_id)
        return pipeline

    def for_schedule(self, cron: str) -> list[Pipeline]:
        """Pipelines whose schedule is exactly `cron`, in registry order."""
        return [p for p in self._pipelines if p.schedule == cron]

    def schedules(self) -> list[str]:
        """Distinct declared schedules, in registry order."""
        found: list[str] = []
        for pipeline in self._pipelines:
            if pipeline.schedule and pipeline.schedule not in found:
                found.append(pipeline.schedule)
        return found


def default_catalog() -> PipelineCatalog:
    """Catalog of the built-in maintenance pipelines."""
    catalog = PipelineCatalog(DEFAULT_PIPELINES)
    logger.debug("Pipeline catalog loaded", pipelines=[p.id for p in catalog])
    return catalog
