"""
Models package: re-exports Base and all models.

Import models here so Alembic's `target_metadata = Base.metadata`
picks up every table automatically.

When adding a new model:
    1. Create `orchestrator/db/models/<table_name>.py`
    2. Import it here
"""

from orchestrator.db.models.base import Base
from orchestrator.db.models.delegated_task import DelegatedTask
from orchestrator.db.models.pipeline_run import PipelineRun

__all__ = [
    "Base",
    "DelegatedTask",
    "PipelineRun",
]
