"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from orchestrator.core.constants import AgentType
from orchestrator.db.models import Base
from orchestrator.pipeline.catalog import PipelineCatalog
from orchestrator.pipeline.conditions import StepSucceeded
from orchestrator.pipeline.executor import StepExecutor
from orchestrator.pipeline.models import Pipeline, PipelineStep
from orchestrator.pipeline.run_store import RunStore
from orchestrator.pipeline.service import PipelineService

from fakes import RecordingScheduler, ScriptedDelegator


def make_pipeline(
    pipeline_id: str = "abc",
    *,
    steps: tuple[PipelineStep, ...] | None = None,
    schedule: str | None = None,
) -> Pipeline:
    """Build a small pipeline: A, B (tolerated failure), C only if B succeeded."""
    return Pipeline(
        id=pipeline_id,
        name=pipeline_id.title(),
        description=f"{pipeline_id} test pipeline",
        schedule=schedule,
        steps=steps or (
            PipelineStep(id="A", agent=AgentType.HEALTH, task="taskA"),
            PipelineStep(id="B", agent=AgentType.CONTENT, task="taskB", continue_on_error=True),
            PipelineStep(
                id="C",
                agent=AgentType.CONTENT,
                task="taskC",
                condition=StepSucceeded("B"),
            ),
        ),
    )


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orchestrator.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def store(session_factory) -> RunStore:
    return RunStore(session_factory)


@pytest.fixture
def delegator() -> ScriptedDelegator:
    return ScriptedDelegator()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def catalog() -> PipelineCatalog:
    return PipelineCatalog([make_pipeline()])


@pytest.fixture
def executor(store, delegator, scheduler, catalog) -> StepExecutor:
    return StepExecutor(store, delegator, scheduler, catalog)


@pytest.fixture
def service(store, delegator, scheduler, catalog) -> PipelineService:
    return PipelineService(catalog=catalog, store=store, delegator=delegator, scheduler=scheduler)
