"""
Main entrypoint for the Evenza API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds
and configures the app, which is then instantiated at module
import time as ``app``.  Run it with uvicorn, e.g.::

    uvicorn evenza_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import Database, resolve_database_path
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the module level ``settings``
        (tests pass one pointing at a temporary database).

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    # Initialise logging before anything else so that imports below can
    # safely log messages.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version, debug=app_settings.debug)
    app.state.settings = app_settings
    app.state.db = Database(resolve_database_path(app_settings.database_url))

    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    @app.on_event("startup")
    async def startup_event() -> None:
        # Apply migrations at startup.  Requests arriving before this
        # point still get a migrated database through ``Database.connect``.
        app.state.db.init()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
