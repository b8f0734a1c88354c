"""
Celery configuration for the pipeline orchestrator.

Loaded by `celery_app.config_from_object("celeryconfig")` in
orchestrator/tasks/__init__.py.  Broker and result-backend URLs come
from environment variables, defaulting to localhost for local dev.
The beat schedule is not set here; it is built from the pipeline
catalog when the Celery app is created.
"""

import os

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

# ═══════════════════════════════════════════════════════════
#  Serialization: JSON only
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ═══════════════════════════════════════════════════════════
#  Timezone (cron schedules are evaluated in UTC)
# ═══════════════════════════════════════════════════════════

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

# Acknowledge after completion; duplicate redeliveries are rejected by
# the run version check.
task_acks_late = True
task_reject_on_worker_lost = True

worker_prefetch_multiplier = 1

# One task runs at most one delegation, bounded by the HTTP timeout
task_soft_time_limit = 300
task_time_limit = 330

# No automatic retries of delegated steps
task_max_retries = 0

# ═══════════════════════════════════════════════════════════
#  Result Expiry
# ═══════════════════════════════════════════════════════════

result_expires = 86400

# ═══════════════════════════════════════════════════════════
#  Worker Settings
# ═══════════════════════════════════════════════════════════

worker_max_tasks_per_child = 200

worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
# Run a dedicated worker and beat:
#   celery -A orchestrator.tasks worker -Q pipelines
#   celery -A orchestrator.tasks beat

task_routes = {
    "pipelines.*": {"queue": "pipelines"},
}

task_default_queue = "default"
