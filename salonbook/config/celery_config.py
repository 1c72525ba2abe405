# salonbook/config/celery_config.py
"""Celery application factory and beat schedule"""
from celery import Celery
from celery.schedules import crontab

from salonbook.config.settings import get_settings


def create_celery_app() -> Celery:
    """Create and configure the Celery app used by the worker and beat"""
    settings = get_settings()

    app = Celery(
        "salonbook",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["salonbook.tasks.holiday_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone=settings.SALON_TIMEZONE,
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
    )

    # Refresh next year's public holidays every December and re-sync the current
    # year on the first of January.
    app.conf.beat_schedule = {
        "import-next-year-holidays": {
            "task": "salonbook.tasks.holiday_tasks.import_public_holidays",
            "schedule": crontab(minute=0, hour=3, day_of_month=1, month_of_year=12),
            "kwargs": {"next_year": True},
        },
        "import-current-year-holidays": {
            "task": "salonbook.tasks.holiday_tasks.import_public_holidays",
            "schedule": crontab(minute=0, hour=3, day_of_month=1, month_of_year=1),
        },
    }

    return app


celery_app = create_celery_app()
