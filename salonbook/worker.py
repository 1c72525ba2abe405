"""
Celery worker entry point
Handles background holiday imports
"""
import logging
from celery.signals import worker_ready, worker_shutdown

from salonbook.config.celery_config import celery_app
from salonbook.utils.my_logging import setup_logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    """Handle worker startup"""
    logger.info("🚀 Celery worker ready!")
    logger.info(f"📋 Registered tasks: {list(celery_app.tasks.keys())}")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    """Handle worker shutdown"""
    logger.info("🛑 Celery worker shutting down...")


if __name__ == "__main__":
    # Run worker directly
    celery_app.start([
        'worker',
        '--beat',
        '--loglevel=info',
        '--concurrency=2',
    ])
