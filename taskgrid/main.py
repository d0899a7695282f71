# File: /taskgrid/main.py | Version: 1.2 | Title: FastAPI App (workspace state service)
from __future__ import annotations

import logging

from fastapi import FastAPI

from taskgrid import __version__
from taskgrid.core.config import settings
from taskgrid.core.logging import configure_logging
from taskgrid.observability.sentry import init_sentry_if_configured
from taskgrid.routers import health, workspace_state

# Initialize logging & observability
configure_logging()
logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)
init_sentry_if_configured()

# App
app = FastAPI(title=f"TaskGrid State Service ({settings.SERVICE_NAME})", version=__version__)

app.include_router(workspace_state.router)
app.include_router(health.router)

# Optional standardized error responses
if getattr(settings, "ENABLE_STD_ERRORS", False):
    from taskgrid.core.error_handlers import register_exception_handlers

    register_exception_handlers(app)
