"""Test doubles for the delegator and the task scheduler."""

from __future__ import annotations

from typing import Any, Mapping

from orchestrator.core.constants import TaskKind
from orchestrator.pipeline.models import StepResult


class ScriptedDelegator:
    """
    Stands in for AgentDelegator.

    Returns the scripted StepResult for a task name, or a success whose
    data echoes the task name.  Every call is recorded.
    """

    def __init__(self, script: Mapping[str, StepResult] | None = None) -> None:
        self.script = dict(script or {})
        self.calls: list[tuple[str, str, Any]] = []

    async def delegate(self, agent: str, task_name: str, params: Any = None) -> StepResult:
        self.calls.append((agent, task_name, params))
        scripted = self.script.get(task_name)
        if scripted is not None:
            return scripted
        return StepResult(success=True, data={"task": task_name}, duration_ms=1)

    @property
    def task_names(self) -> list[str]:
        return [task for _, task, _ in self.calls]


class RecordingScheduler:
    """Collects scheduled work instead of sending it to a broker."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[TaskKind, dict[str, Any]]] = []

    def schedule(self, kind: TaskKind, payload: Mapping[str, Any]) -> None:
        self.scheduled.append((kind, dict(payload)))

    async def drain(self, executor) -> int:
        """Deliver queued continuations one by one until none remain."""
        delivered = 0
        while self.scheduled:
            kind, payload = self.scheduled.pop(0)
            assert kind is TaskKind.CONTINUE_PIPELINE
            await executor.resume(payload["run_id"])
            delivered += 1
        return delivered


class BrokenScheduler(RecordingScheduler):
    """A scheduler whose broker is unreachable."""

    def schedule(self, kind: TaskKind, payload: Mapping[str, Any]) -> None:
        raise ConnectionError("broker unreachable")
