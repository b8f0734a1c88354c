"""Health pipelines: endpoint probes and a full scan every six hours."""

from __future__ import annotations

from orchestrator.core.constants import AgentType
from orchestrator.pipeline.models import Pipeline, PipelineStep

comprehensive_health_pipeline = Pipeline(
    id="comprehensive-health",
    name="Comprehensive Health Check",
    description="Full health scan of all endpoints and services",
    schedule="0 */6 * * *",
    steps=(
        PipelineStep(
            id="check-production",
            agent=AgentType.HEALTH,
            task="checkEndpoint",
            params={"url": "https://breathe-together.pages.dev", "expectedStatus": 200},
        ),
        PipelineStep(
            id="check-presence-api",
            agent=AgentType.HEALTH,
            task="checkEndpoint",
            params={
                "url": "https://breathe-together-presence.workers.dev/api/config",
                "expectedStatus": 200,
            },
        ),
        PipelineStep(
            id="check-kv-latency",
            agent=AgentType.HEALTH,
            task="checkKVLatency",
        ),
        PipelineStep(
            id="full-scan",
            agent=AgentType.HEALTH,
            task="runHealthScan",
            params={"quick": False},
        ),
    ),
)
