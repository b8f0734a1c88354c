"""
Domain-specific exception hierarchy for the pipeline orchestrator.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (run ID, step ID, etc.) for logging/debugging.

Only DefinitionNotFoundError subclasses are meant to reach the HTTP
boundary.  Delegation errors are raised and caught inside the delegator
and surface as failing StepResults.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        run_id: str | None = None,
        step_id: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.run_id = run_id
        self.step_id = step_id
        self.details = details or {}
        super().__init__(message)


class DefinitionNotFoundError(PipelineError):
    """An id did not resolve to a known pipeline or run."""

    def __init__(self, message: str, *, identifier: str, **kwargs) -> None:
        self.identifier = identifier
        super().__init__(message, **kwargs)


class PipelineNotFoundError(DefinitionNotFoundError):
    """No pipeline with the given id is registered in the catalog."""

    def __init__(self, pipeline_id: str, **kwargs) -> None:
        super().__init__(
            f"Pipeline not found: {pipeline_id}",
            identifier=pipeline_id,
            **kwargs,
        )


class RunNotFoundError(DefinitionNotFoundError):
    """No run with the given id exists in the run store."""

    def __init__(self, run_id: str, **kwargs) -> None:
        super().__init__("Run not found", identifier=run_id, run_id=run_id, **kwargs)


class CatalogError(PipelineError):
    """A pipeline definition violates a catalog invariant."""
    pass


class ConditionError(PipelineError):
    """A step condition could not be parsed or evaluated."""
    pass


class DelegationError(PipelineError):
    """Base for failures while handing a task to a worker agent."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_body: object = None,
        **kwargs,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, **kwargs)


class UnknownAgentError(DelegationError):
    """The requested agent type is not one of the known workers."""
    pass


class WorkerSetUnavailableError(DelegationError):
    """No worker endpoint is configured, so nothing can be reached."""
    pass


class DelegationTransportError(DelegationError):
    """Network, HTTP status, or response parsing failure talking to a worker."""
    pass


class StepFailure(PipelineError):
    """A delegated step failed and its failure policy aborts the run."""

    def __init__(self, step_id: str, error: str | None, **kwargs) -> None:
        self.error = error
        super().__init__(f"{step_id} failed: {error}", step_id=step_id, **kwargs)
