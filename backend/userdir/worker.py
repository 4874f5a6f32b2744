"""
User Directory Celery Worker
Background processing for account notifications.
"""

from celery.signals import setup_logging
from celery import Celery
from userdir.config import settings
from userdir.logging_config import setup_logging as configure_logging


@setup_logging.connect
def on_setup_logging(**kwargs):
    configure_logging(log_dir=settings.log_dir, log_level=settings.log_level)


# Create Celery app
celery_app = Celery(
    "UserDirectory",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "userdir.tasks.notifications",
    ]
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task settings
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,
    task_acks_late=True,  # Only acknowledge task after successful completion
    task_reject_on_worker_lost=True,  # Re-queue task if worker is killed

    # Result settings
    result_expires=86400,  # Results expire after 24 hours

    broker_connection_retry_on_startup=True,
)

celery_app.conf.task_routes = {
    "userdir.tasks.notifications.*": {"queue": "notifications"},
}


if __name__ == "__main__":
    celery_app.start()
