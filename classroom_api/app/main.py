"""
Main entrypoint for the Classroom Admin API.

This module assembles the FastAPI application, sets up logging,
installs the error handlers and includes the versioned router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn classroom_api.app.main:app --reload

The application title, version and route prefix come from
``Settings`` in ``core.config``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .api.errors import install_error_handlers
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import get_database_path, init_db
from .core.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger = logging.getLogger(__name__)
    if settings.storage_backend == "memory":
        logger.info("Using in-memory storage; data is lost on restart")
    else:
        # Creates the database file on first start and applies any
        # pending schema versions.
        init_db()
        logger.info("Using SQLite database at %s", get_database_path())
    yield


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    install_error_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)
    return app


app = create_app()
