"""
DelegatedTask: audit row for every task handed to a worker agent.

Written once per delegation, either on behalf of a pipeline run
(run_id set) or for an ad hoc delegateTask request (run_id NULL).
Never read back by the orchestrator itself.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text

from orchestrator.db.models.base import Base, JSONType, generate_id, utcnow


class DelegatedTask(Base):
    """One row per delegation."""

    __tablename__ = "delegated_tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    run_id = Column(String(36), nullable=True, index=True)

    # ── Request ───────────────────────────────
    agent_type = Column(String(50), nullable=False)
    task_name = Column(String(100), nullable=False)
    payload = Column(JSONType, nullable=False, default=dict)

    # ── Outcome ───────────────────────────────
    status = Column(String(20), nullable=False)
    result = Column(JSONType, nullable=True)
    error = Column(Text, nullable=True)

    # ── Timestamps ────────────────────────────
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<DelegatedTask {self.agent_type}.{self.task_name} status={self.status} run={self.run_id}>"
