"""
Static pipeline definitions.

Each module groups the pipelines of one maintenance domain:
    - health.py: endpoint and latency checks
    - maintenance.py: daily / weekly upkeep across agents
    - content.py: content freshness and stats

To add a pipeline:
    1. Define it in the module for its domain
    2. Append it to DEFAULT_PIPELINES below
    3. The catalog validates it at startup
"""

from orchestrator.pipeline.pipelines.content import content_refresh_pipeline
from orchestrator.pipeline.pipelines.health import comprehensive_health_pipeline
from orchestrator.pipeline.pipelines.maintenance import (
    daily_maintenance_pipeline,
    weekly_maintenance_pipeline,
)

DEFAULT_PIPELINES = (
    comprehensive_health_pipeline,
    daily_maintenance_pipeline,
    weekly_maintenance_pipeline,
    content_refresh_pipeline,
)

__all__ = [
    "DEFAULT_PIPELINES",
    "comprehensive_health_pipeline",
    "daily_maintenance_pipeline",
    "weekly_maintenance_pipeline",
    "content_refresh_pipeline",
]
