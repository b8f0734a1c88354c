"""API schema package."""

from orchestrator.api.schemas.pipeline import (
    ErrorResponse,
    PipelineListResponse,
    RunDetail,
    RunListResponse,
    TriggerRequest,
    TriggerResponse,
)

__all__ = [
    "ErrorResponse",
    "PipelineListResponse",
    "RunDetail",
    "RunListResponse",
    "TriggerRequest",
    "TriggerResponse",
]
