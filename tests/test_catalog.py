"""Tests for the pipeline catalog and the built-in definitions."""

import pytest

from orchestrator.core.constants import AgentType
from orchestrator.pipeline.catalog import PipelineCatalog, default_catalog
from orchestrator.pipeline.conditions import StepSucceeded
from orchestrator.pipeline.errors import CatalogError, PipelineNotFoundError
from orchestrator.pipeline.models import PipelineStep

from conftest import make_pipeline


class TestDefaultCatalog:
    def test_every_pipeline_is_well_formed(self):
        catalog = default_catalog()
        ids = [p.id for p in catalog]
        assert len(ids) == len(set(ids))
        for pipeline in catalog:
            assert pipeline.steps
            step_ids = [s.id for s in pipeline.steps]
            assert len(step_ids) == len(set(step_ids))
            for step in pipeline.steps:
                assert step.id and step.task
                assert step.agent in AgentType

    def test_known_pipelines(self):
        catalog = default_catalog()
        assert [p.id for p in catalog] == [
            "comprehensive-health",
            "daily-maintenance",
            "weekly-maintenance",
            "content-refresh",
        ]

    def test_daily_cleanup_depends_on_freshness(self):
        daily = default_catalog().get("daily-maintenance")
        cleanup = daily.steps[-1]
        assert cleanup.id == "cleanup-stale"
        assert cleanup.condition == StepSucceeded("content-freshness")


class TestLookup:
    def test_get_unknown_raises(self):
        with pytest.raises(PipelineNotFoundError, match="Pipeline not found: nope"):
            default_catalog().get("nope")

    def test_for_schedule_exact_match(self):
        catalog = default_catalog()
        assert [p.id for p in catalog.for_schedule("0 4 * * *")] == ["daily-maintenance"]
        assert catalog.for_schedule("0 4 * * * ") == []
        assert catalog.for_schedule("*/5 * * * *") == []

    def test_for_schedule_keeps_registry_order(self):
        catalog = PipelineCatalog([
            make_pipeline("first", schedule="0 1 * * *"),
            make_pipeline("other", schedule="0 2 * * *"),
            make_pipeline("second", schedule="0 1 * * *"),
        ])
        assert [p.id for p in catalog.for_schedule("0 1 * * *")] == ["first", "second"]

    def test_schedules_are_distinct(self):
        catalog = PipelineCatalog([
            make_pipeline("first", schedule="0 1 * * *"),
            make_pipeline("unscheduled"),
            make_pipeline("second", schedule="0 1 * * *"),
        ])
        assert catalog.schedules() == ["0 1 * * *"]


class TestValidation:
    def test_duplicate_pipeline_ids(self):
        with pytest.raises(CatalogError, match="Duplicate pipeline id"):
            PipelineCatalog([make_pipeline("x"), make_pipeline("x")])

    def test_duplicate_step_ids(self):
        steps = (
            PipelineStep(id="s", agent=AgentType.HEALTH, task="t"),
            PipelineStep(id="s", agent=AgentType.HEALTH, task="t"),
        )
        with pytest.raises(CatalogError, match="duplicate step id"):
            PipelineCatalog([make_pipeline(steps=steps)])

    def test_condition_must_reference_earlier_step(self):
        steps = (
            PipelineStep(id="a", agent=AgentType.HEALTH, task="t", condition=StepSucceeded("b")),
            PipelineStep(id="b", agent=AgentType.HEALTH, task="t"),
        )
        with pytest.raises(CatalogError, match="not an earlier step"):
            PipelineCatalog([make_pipeline(steps=steps)])

    def test_bad_cron(self):
        with pytest.raises(CatalogError, match="cron fields"):
            PipelineCatalog([make_pipeline(schedule="daily")])

    def test_unknown_agent(self):
        steps = (PipelineStep(id="a", agent="database", task="t"),)
        with pytest.raises(CatalogError, match="unknown agent"):
            PipelineCatalog([make_pipeline(steps=steps)])
