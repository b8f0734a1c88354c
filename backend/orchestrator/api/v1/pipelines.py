"""
Pipeline endpoints: list definitions, inspect runs, trigger a run.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from orchestrator.api.deps import get_pipeline_service
from orchestrator.api.schemas.pipeline import (
    ErrorResponse,
    PipelineListResponse,
    RunDetail,
    RunListResponse,
    TriggerRequest,
    TriggerResponse,
)
from orchestrator.core.config import settings
from orchestrator.core.constants import MAX_RUNS_PAGE
from orchestrator.pipeline.service import PipelineService

router = APIRouter(prefix="/pipelines", tags=["Pipelines"])


# ─── Definitions ──────────────────────────────────────────
@router.get("", response_model=PipelineListResponse)
async def list_pipelines(service: PipelineService = Depends(get_pipeline_service)):
    """List every registered pipeline."""
    return {"pipelines": service.list_pipelines()}


# ─── Runs ─────────────────────────────────────────────────
@router.get("/runs", response_model=RunListResponse)
async def list_runs(
    limit: int = Query(settings.RECENT_RUNS_LIMIT, ge=1),
    service: PipelineService = Depends(get_pipeline_service),
):
    """Most recent runs first; limit is capped at MAX_RUNS_PAGE."""
    runs = await service.list_runs(min(limit, MAX_RUNS_PAGE))
    return {"runs": [run.summary() for run in runs]}


@router.get(
    "/runs/{run_id}",
    response_model=RunDetail,
    responses={404: {"model": ErrorResponse}},
)
async def get_run(run_id: str, service: PipelineService = Depends(get_pipeline_service)):
    """Full run detail, including step results."""
    run = await service.get_run(run_id)
    return run.to_dict()


# ─── Trigger ──────────────────────────────────────────────
@router.post(
    "/run",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=TriggerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def trigger_pipeline(
    body: TriggerRequest | None = None,
    service: PipelineService = Depends(get_pipeline_service),
):
    """
    Trigger a pipeline.

    1. Creates a running PipelineRun row (visible immediately)
    2. Queues the first step on Celery
    3. Returns instantly with the run id
    """
    if body is None or not body.pipelineId:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "pipelineId required"},
        )

    run_id = await service.trigger(body.pipelineId)
    return {"runId": run_id, "status": "started"}
