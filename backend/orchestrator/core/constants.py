"""Shared constants and enums used across the application."""

from enum import StrEnum


class RunStatus(StrEnum):
    """Lifecycle status of a pipeline run."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class DelegatedTaskStatus(StrEnum):
    """Outcome of a single delegation recorded for audit."""

    COMPLETED = "completed"
    FAILED = "failed"


class AgentType(StrEnum):
    """Worker agents a step can be delegated to."""

    HEALTH = "health"
    CONTENT = "content"
    GITHUB = "github"


class TaskKind(StrEnum):
    """Units of work the task substrate hands back to the orchestrator."""

    RUN_PIPELINE = "runPipeline"
    CONTINUE_PIPELINE = "continuePipeline"
    DELEGATE_TASK = "delegateTask"


# Celery task names, one per TaskKind.
TASK_NAMES: dict[TaskKind, str] = {
    TaskKind.RUN_PIPELINE: "pipelines.run_pipeline",
    TaskKind.CONTINUE_PIPELINE: "pipelines.continue_pipeline",
    TaskKind.DELEGATE_TASK: "pipelines.delegate_task",
}

TRIGGER_SCHEDULED_TASK = "pipelines.trigger_scheduled"

# Worker endpoint that accepts delegated tasks.
AGENT_TASKS_PATH = "/tasks"

MAX_RUNS_PAGE = 200
