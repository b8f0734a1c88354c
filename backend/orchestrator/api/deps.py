"""Shared dependencies for API routes."""

from __future__ import annotations

from fastapi import Request

from orchestrator.pipeline.service import PipelineService


def get_pipeline_service(request: Request) -> PipelineService:
    """Return the PipelineService built at application startup."""
    return request.app.state.pipeline_service
