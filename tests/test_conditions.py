"""Tests for declarative step conditions."""

import pytest

from orchestrator.pipeline.conditions import (
    AllSucceeded,
    StepFailed,
    StepSucceeded,
    condition_from_dict,
    evaluate_condition,
    referenced_step,
)
from orchestrator.pipeline.errors import ConditionError
from orchestrator.pipeline.models import StepResult

RESULTS = (
    StepResult(success=True, step_id="a"),
    StepResult(success=False, error="boom", step_id="b"),
)


class TestEvaluate:
    def test_step_succeeded(self):
        assert evaluate_condition(StepSucceeded("a"), RESULTS) is True
        assert evaluate_condition(StepSucceeded("b"), RESULTS) is False

    def test_step_failed(self):
        assert evaluate_condition(StepFailed("b"), RESULTS) is True
        assert evaluate_condition(StepFailed("a"), RESULTS) is False

    def test_missing_step_is_neither_succeeded_nor_failed(self):
        assert evaluate_condition(StepSucceeded("skipped"), RESULTS) is False
        assert evaluate_condition(StepFailed("skipped"), RESULTS) is False

    def test_all_succeeded(self):
        assert evaluate_condition(AllSucceeded(), RESULTS[:1]) is True
        assert evaluate_condition(AllSucceeded(), RESULTS) is False
        assert evaluate_condition(AllSucceeded(), ()) is True

    def test_unsupported_object_raises(self):
        with pytest.raises(ConditionError, match="Unsupported condition"):
            evaluate_condition(lambda results: True, RESULTS)


class TestSerialisation:
    @pytest.mark.parametrize(
        "condition",
        [StepSucceeded("x"), StepFailed("y"), AllSucceeded()],
    )
    def test_from_dict_inverts_to_dict(self, condition):
        assert condition_from_dict(condition.to_dict()) == condition

    def test_unknown_kind(self):
        with pytest.raises(ConditionError, match="Unknown condition kind"):
            condition_from_dict({"kind": "sometimes"})

    def test_missing_step_id(self):
        with pytest.raises(ConditionError, match="requires a step_id"):
            condition_from_dict({"kind": "step_failed"})

    def test_referenced_step(self):
        assert referenced_step(StepFailed("z")) == "z"
        assert referenced_step(AllSucceeded()) is None
