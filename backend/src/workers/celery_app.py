"""Celery application for scheduled maintenance.

Run:
    celery -A workers.celery_app worker --beat
"""

from celery import Celery
from celery.schedules import crontab

from config import get_settings

settings = get_settings()

celery_app = Celery(
    "documents",
    broker=settings.CELERY_BROKER_URL,
    include=["retention.tasks"],
)
celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
)

celery_app.conf.beat_schedule = {
    'purge-processed-messages-daily': {
        'task': 'retention.purge_processed_messages',
        'schedule': crontab(hour=2, minute=0),  # 02:00 UTC
        'options': {
            'expires': 3600,  # Task expires after 1 hour if not picked up
        },
    },
}
