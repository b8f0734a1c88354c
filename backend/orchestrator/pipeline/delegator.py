"""
AgentDelegator: hands one task to a worker agent over HTTP.

Each delegation is a single POST to the worker's task endpoint::

    POST {agent_base_url}/tasks
    {"name": "<task name>", "payload": {...params}}

The response body becomes StepResult.data.  Every failure mode
(unknown agent, no configured workers, transport error, non-2xx status,
malformed body) is converted into a failing StepResult here, so callers
never see an exception from a delegation.
"""

from __future__ import annotations

import time
from typing import Any, Mapping

import httpx

from orchestrator.core.constants import AGENT_TASKS_PATH, AgentType
from orchestrator.core.logging import get_logger
from orchestrator.pipeline.errors import (
    DelegationError,
    DelegationTransportError,
    UnknownAgentError,
    WorkerSetUnavailableError,
)
from orchestrator.pipeline.models import StepResult

logger = get_logger(__name__)

# Default timeout for worker calls (seconds)
DEFAULT_TIMEOUT = 30.0


def parse_agent_type(value: str) -> AgentType:
    """Resolve a worker identifier, rejecting anything outside AgentType."""
    try:
        return AgentType(value)
    except ValueError:
        valid = ", ".join(a.value for a in AgentType)
        raise UnknownAgentError(
            f"Invalid agent type: {value}. Valid types: {valid}",
            details={"agent": value},
        ) from None


class AgentDelegator:
    """
    Sends structured task requests to worker agents.

    Args:
        endpoints: Base URL per agent type.  Agents without an entry are
                   treated as not deployed.
        timeout: HTTP timeout in seconds for the whole request.
        transport: Optional httpx transport (tests pass MockTransport).
    """

    def __init__(
        self,
        endpoints: Mapping[AgentType, str] | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoints = dict(endpoints or {})
        self._timeout = timeout
        self._transport = transport

    async def delegate(self, agent: str, task_name: str, params: Any = None) -> StepResult:
        """Delegate one task and return its normalised result."""
        started = time.monotonic()
        log = logger.bind(agent=agent, task=task_name)

        try:
            url = self._resolve_url(agent)
            log.info("Delegating task", url=url)
            data = await self._post(url, task_name, params)

        except DelegationError as exc:
            duration_ms = _elapsed_ms(started)
            log.warning(
                "Delegation failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=duration_ms,
            )
            return StepResult(
                success=False,
                data=exc.response_body,
                error=str(exc),
                duration_ms=duration_ms,
            )

        duration_ms = _elapsed_ms(started)
        log.info("Delegation succeeded", duration_ms=duration_ms)
        return StepResult(success=True, data=data, duration_ms=duration_ms)

    def _resolve_url(self, agent: str) -> str:
        # Checked before the agent id so an unconfigured process fails fast.
        if not self._endpoints:
            raise WorkerSetUnavailableError("Agent endpoints not configured")

        agent_type = parse_agent_type(agent)
        base_url = self._endpoints.get(agent_type)
        if not base_url:
            raise WorkerSetUnavailableError(
                f"No endpoint configured for agent '{agent_type.value}'",
                details={"agent": agent_type.value},
            )
        return f"{base_url}{AGENT_TASKS_PATH}"

    async def _post(self, url: str, task_name: str, params: Any) -> Any:
        body = {"name": task_name, "payload": params if params is not None else {}}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json=body)
        except httpx.HTTPError as exc:
            raise DelegationTransportError(
                f"Request to {url} failed: {exc!r}"
            ) from exc

        if not response.is_success:
            raise DelegationTransportError(
                f"Agent returned HTTP {response.status_code}",
                status_code=response.status_code,
                response_body=_body(response),
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DelegationTransportError(
                f"Malformed response from {url}",
                status_code=response.status_code,
                response_body=response.text,
            ) from exc

        # Workers report task-level failure in the body with a 2xx status.
        if isinstance(data, dict) and data.get("success") is False:
            raise DelegationError(
                str(data.get("error") or "Agent reported task failure"),
                status_code=response.status_code,
                response_body=data,
            )

        return data


def _body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
