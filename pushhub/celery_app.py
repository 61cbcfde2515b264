"""Celery application running notification dispatches."""

from celery import Celery

from pushhub.config import get_settings

settings = get_settings()

app = Celery(
    "pushhub",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["pushhub.tasks.dispatch"],
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_default_queue="notifications",
    # A dispatch fans out to every subscriber; don't let one worker hoard several
    worker_prefetch_multiplier=1,
    # Dispatch summaries are only kept for troubleshooting
    result_expires=86400,
)
