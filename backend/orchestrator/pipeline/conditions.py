"""
Declarative step conditions.

A step may carry a condition that decides, from the results of steps
already executed in the same run, whether the step runs at all.
Conditions are plain frozen dataclasses so they can be stored next to
pipeline definitions, serialised, and evaluated by a pure function.

Skipped steps leave no result, so a condition referencing a skipped step
sees it as absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Sequence

from orchestrator.pipeline.errors import ConditionError

if TYPE_CHECKING:
    from orchestrator.pipeline.models import StepResult


@dataclass(frozen=True)
class StepSucceeded:
    """True when the referenced step ran and succeeded."""

    step_id: str
    kind: ClassVar[str] = "step_succeeded"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "step_id": self.step_id}


@dataclass(frozen=True)
class StepFailed:
    """True when the referenced step ran and failed."""

    step_id: str
    kind: ClassVar[str] = "step_failed"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "step_id": self.step_id}


@dataclass(frozen=True)
class AllSucceeded:
    """True when every result recorded so far is a success."""

    kind: ClassVar[str] = "all_succeeded"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


Condition = StepSucceeded | StepFailed | AllSucceeded


def _find(results: Sequence[StepResult], step_id: str) -> StepResult | None:
    for result in results:
        if result.step_id == step_id:
            return result
    return None


def evaluate_condition(condition: Condition, results: Sequence[StepResult]) -> bool:
    """
    Evaluate a condition against the accumulated results of a run.

    Raises:
        ConditionError: If the object is not a supported condition.
    """
    match condition:
        case StepSucceeded(step_id=step_id):
            found = _find(results, step_id)
            return found is not None and found.success
        case StepFailed(step_id=step_id):
            found = _find(results, step_id)
            return found is not None and not found.success
        case AllSucceeded():
            return all(r.success for r in results)
        case _:
            raise ConditionError(f"Unsupported condition: {condition!r}")


_KINDS = {
    "step_succeeded": StepSucceeded,
    "step_failed": StepFailed,
    "all_succeeded": AllSucceeded,
}


def condition_from_dict(data: dict[str, Any]) -> Condition:
    """Rebuild a condition from its to_dict() form."""
    kind = data.get("kind")
    cls = _KINDS.get(kind)
    if cls is None:
        raise ConditionError(f"Unknown condition kind: {kind!r}")
    if cls is AllSucceeded:
        return AllSucceeded()
    step_id = data.get("step_id")
    if not step_id:
        raise ConditionError(f"Condition '{kind}' requires a step_id")
    return cls(step_id=step_id)


def referenced_step(condition: Condition) -> str | None:
    """Return the step id a condition depends on, if any."""
    if isinstance(condition, (StepSucceeded, StepFailed)):
        return condition.step_id
    return None
