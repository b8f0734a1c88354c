"""Content pipelines. Unscheduled; triggered on demand."""

from __future__ import annotations

from orchestrator.core.constants import AgentType
from orchestrator.pipeline.models import Pipeline, PipelineStep

content_refresh_pipeline = Pipeline(
    id="content-refresh",
    name="Content Refresh",
    description="Check and refresh stale content",
    steps=(
        PipelineStep(
            id="check-freshness",
            agent=AgentType.CONTENT,
            task="checkContentFreshness",
        ),
        PipelineStep(
            id="get-stats",
            agent=AgentType.CONTENT,
            task="getContentStats",
        ),
    ),
)
