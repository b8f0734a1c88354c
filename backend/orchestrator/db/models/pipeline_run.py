"""
PipelineRun: one row per pipeline execution.

The row is the durable state a run resumes from: which step was last
claimed, the ordered results of every executed step, and a version
counter used as a compare-and-swap guard so a continuation delivered
twice cannot delegate the same step twice.

Rows are never deleted; terminal rows stay queryable for audit.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text

from orchestrator.db.models.base import Base, JSONType, generate_id, utcnow


class PipelineRun(Base):
    """One row per pipeline run."""

    __tablename__ = "pipeline_runs"

    id = Column(String(36), primary_key=True, default=generate_id)
    pipeline_id = Column(String(100), nullable=False, index=True)

    # ── Status / Progress ────────────────────
    status = Column(String(20), nullable=False, default="running", index=True)
    current_step = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)

    # ── Results (ordered, one per executed step) ──
    results = Column(JSONType, nullable=False, default=list)

    # ── Timing (UTC) ─────────────────────────
    started_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # ── Error ─────────────────────────────────
    error = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<PipelineRun {self.id} pipeline={self.pipeline_id} status={self.status} step={self.current_step} v{self.version}>"
