"""Celery application configuration."""

from celery import Celery

from src.config import get_settings

settings = get_settings()

app = Celery(
    "askaround",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["src.tasks.maintenance"],
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes max per task
    task_soft_time_limit=240,  # 4 minutes soft limit
)

# Periodic tasks (run with: celery -A src.celery_app beat)
app.conf.beat_schedule = {
    "reconcile-question-counters": {
        "task": "src.tasks.maintenance.reconcile_question_counters",
        "schedule": 3600.0,  # hourly
    },
}
