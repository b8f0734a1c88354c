"""
Pipeline definitions and run state.

Pipeline and PipelineStep are immutable definitions built once when the
catalog is loaded.  StepResult is produced once per delegated step and
never mutated.  Run is a read-only snapshot of a persisted pipeline_runs
row; the RunStore is the only writer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from orchestrator.core.constants import AgentType, RunStatus
from orchestrator.pipeline.conditions import Condition


# ═══════════════════════════════════════════════════════════
#  Definitions
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PipelineStep:
    """
    One unit of delegated work inside a pipeline.

    Args:
        id: Unique within its pipeline, e.g. "content-freshness".
        agent: Worker the task is delegated to.
        task: Task name understood by that worker.
        params: Payload sent with the task.
        condition: Optional skip rule over prior results.
        continue_on_error: Keep the run going when this step fails.
    """

    id: str
    agent: AgentType
    task: str
    params: dict[str, Any] = field(default_factory=dict)
    condition: Condition | None = None
    continue_on_error: bool = False


@dataclass(frozen=True)
class Pipeline:
    """A named, ordered list of steps with an optional cron schedule."""

    id: str
    name: str
    description: str
    steps: tuple[PipelineStep, ...]
    schedule: str | None = None

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "steps": len(self.steps),
            "schedule": self.schedule,
        }


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StepResult:
    """Outcome of a single delegation."""

    success: bool
    data: Any = None
    error: str | None = None
    duration_ms: int = 0
    step_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON storage."""
        return {
            "step_id": self.step_id,
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "duration_ms": self.duration_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StepResult:
        return cls(
            success=bool(data.get("success")),
            data=data.get("data"),
            error=data.get("error"),
            duration_ms=int(data.get("duration_ms") or 0),
            step_id=data.get("step_id"),
        )


# ═══════════════════════════════════════════════════════════
#  Run
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Run:
    """Snapshot of one pipeline execution as persisted."""

    id: str
    pipeline_id: str
    status: RunStatus
    current_step: int
    results: tuple[StepResult, ...]
    started_at: datetime | None
    completed_at: datetime | None = None
    error: str | None = None
    version: int = 0

    @property
    def is_running(self) -> bool:
        return self.status == RunStatus.RUNNING

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pipelineId": self.pipeline_id,
            "status": self.status.value,
            "currentStep": self.current_step,
            "startedAt": self.started_at.isoformat() if self.started_at else None,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.summary(),
            "stepResults": [r.to_dict() for r in self.results],
            "error": self.error,
        }
