"""
Pipeline orchestration engine.

Executes named, ordered pipelines of steps across worker agents one step
per unit of work, persisting progress between steps so a run can be
resumed from the task queue after restarts or scheduling gaps.
"""

from orchestrator.pipeline.models import Pipeline, PipelineStep, Run, StepResult
from orchestrator.pipeline.catalog import PipelineCatalog, default_catalog
from orchestrator.pipeline.service import PipelineService, build_service

__all__ = [
    "Pipeline",
    "PipelineCatalog",
    "PipelineService",
    "PipelineStep",
    "Run",
    "StepResult",
    "build_service",
    "default_catalog",
]
