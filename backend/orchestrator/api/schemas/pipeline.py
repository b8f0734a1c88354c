"""Pipeline request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class TriggerRequest(BaseModel):
    """Request payload for POST /pipelines/run."""

    pipelineId: str | None = None


class TriggerResponse(BaseModel):
    runId: str
    status: str = "started"


class PipelineSummary(BaseModel):
    id: str
    name: str
    description: str
    steps: int
    schedule: str | None


class PipelineListResponse(BaseModel):
    pipelines: list[PipelineSummary]


class RunSummary(BaseModel):
    id: str
    pipelineId: str
    status: str
    currentStep: int
    startedAt: datetime | None
    completedAt: datetime | None


class RunListResponse(BaseModel):
    runs: list[RunSummary]


class RunDetail(RunSummary):
    """Full run including every recorded step result."""

    stepResults: list[dict[str, Any]]
    error: str | None


class ErrorResponse(BaseModel):
    error: str
