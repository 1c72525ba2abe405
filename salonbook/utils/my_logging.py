# salonbook/utils/my_logging.py
"""Logging configuration for the API process, the Celery worker and scripts"""
import logging
import sys
from salonbook.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# Third-party loggers that only matter when debugging
QUIET_LOGGERS = (
    "sqlalchemy",
    "alembic",
    "urllib3",
    "celery",
    "kombu",
    "uvicorn.access",
)


class CorrelationIdFilter(logging.Filter):
    """Give every record a correlation_id so LOG_FORMAT never fails.

    Request logs pass it through ``extra``; background work has none.
    """

    def filter(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def setup_logging(verbose=True):
    """Attach one stdout handler to the root logger; repeated calls are no-ops"""
    settings = get_settings()
    root = logging.getLogger()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    if not any(getattr(h, "salonbook_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        handler.salonbook_handler = True
        root.addHandler(handler)

    root.setLevel(level)
    # Booking and holiday-import events stay visible in quiet mode
    logging.getLogger("salonbook").setLevel(logging.INFO if not verbose else level)

    quiet_level = logging.INFO if verbose else logging.ERROR
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
