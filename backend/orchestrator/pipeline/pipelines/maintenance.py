"""
Maintenance pipelines.

Daily (04:00 UTC): quick health scan, content freshness check (a failure
fails the run), then stale-content cleanup once freshness succeeded.

Weekly (Sunday 03:00 UTC): full scan, inventory sync, stats, deep cleanup.
"""

from __future__ import annotations

from orchestrator.core.constants import AgentType
from orchestrator.pipeline.conditions import StepSucceeded
from orchestrator.pipeline.models import Pipeline, PipelineStep

daily_maintenance_pipeline = Pipeline(
    id="daily-maintenance",
    name="Daily Maintenance",
    description="Daily cleanup and health verification",
    schedule="0 4 * * *",
    steps=(
        PipelineStep(
            id="health-check",
            agent=AgentType.HEALTH,
            task="runHealthScan",
            params={"quick": True},
        ),
        PipelineStep(
            id="content-freshness",
            agent=AgentType.CONTENT,
            task="checkContentFreshness",
        ),
        PipelineStep(
            id="cleanup-stale",
            agent=AgentType.CONTENT,
            task="cleanupStaleContent",
            params={"dryRun": False},
            condition=StepSucceeded("content-freshness"),
        ),
    ),
)

weekly_maintenance_pipeline = Pipeline(
    id="weekly-maintenance",
    name="Weekly Deep Maintenance",
    description="Weekly comprehensive maintenance including inventory sync",
    schedule="0 3 * * 0",
    steps=(
        PipelineStep(
            id="full-health-scan",
            agent=AgentType.HEALTH,
            task="runHealthScan",
            params={"quick": False},
        ),
        PipelineStep(
            id="sync-inventory",
            agent=AgentType.CONTENT,
            task="syncInventory",
        ),
        PipelineStep(
            id="content-stats",
            agent=AgentType.CONTENT,
            task="getContentStats",
        ),
        PipelineStep(
            id="deep-cleanup",
            agent=AgentType.CONTENT,
            task="cleanupStaleContent",
            params={"dryRun": False},
        ),
    ),
)
