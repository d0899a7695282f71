# File: taskgrid/observability/sentry.py | Version: 1.1 | Title: Optional Sentry initialization
import logging
import os

from taskgrid import __version__
from taskgrid.core.config import settings

log = logging.getLogger(__name__)


def init_sentry_if_configured() -> bool:
    dsn = os.getenv("SENTRY_DSN", "").strip()
    if not dsn:
        log.info("Sentry disabled (no SENTRY_DSN).")
        return False

    try:
        import sentry_sdk

        traces = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1"))

        sentry_sdk.init(
            dsn=dsn,
            release=f"{settings.SERVICE_NAME}@{__version__}",
            environment=os.getenv("SENTRY_ENVIRONMENT", "development"),
            traces_sample_rate=traces,
        )
        log.info("Sentry initialized for %s.", settings.SERVICE_NAME)
        return True
    except Exception as e:  # pragma: no cover (best-effort)
        log.warning("Sentry init failed: %s", e)
        return False
