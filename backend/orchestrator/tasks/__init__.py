"""
Celery application factory.
"""

from celery import Celery
from celery.signals import worker_process_init

from orchestrator.core.config import settings
from orchestrator.core.logging import setup_logging
from orchestrator.pipeline.catalog import default_catalog
from orchestrator.tasks.schedule import build_beat_schedule

celery_app = Celery("orchestrator")
celery_app.config_from_object("celeryconfig")
celery_app.conf.beat_schedule = build_beat_schedule(default_catalog())

# Auto-discover tasks in these modules
celery_app.autodiscover_tasks([
    "orchestrator.tasks.pipeline_tasks",
])


@worker_process_init.connect
def _configure_worker_logging(**_kwargs) -> None:
    setup_logging(settings.LOG_LEVEL, json_output=settings.APP_ENV != "development")
