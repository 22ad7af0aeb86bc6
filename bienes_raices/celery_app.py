"""Celery application configuration."""

from celery import Celery

from bienes_raices.config import get_settings

settings = get_settings()

app = Celery(
    "bienes_raices",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["bienes_raices.tasks.emails"],
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    task_time_limit=60,
    task_soft_time_limit=45,
)
