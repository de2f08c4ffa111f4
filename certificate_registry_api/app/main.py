"""
Main entrypoint for the Certificate Registry API.

This module assembles the FastAPI application: it sets up logging,
registers CORS, error handlers and the API routes, and serves uploaded
images.  The ``create_app`` function builds and configures the app,
which is then instantiated at module import time as ``app``, e.g.::

    uvicorn certificate_registry_api.app.main:app --reload
"""

import logging
import sqlite3
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api.router import router as api_router
from .core.config import check_secret_key, settings
from .core.db import init_db
from .core.exceptions import QRCodeGenerationError, StorageError
from .core.logging_config import setup_logging
from .core.storage import UPLOAD_URL_PREFIX, get_upload_dir

logger = logging.getLogger(__name__)


def _server_error(exc: Exception) -> JSONResponse:
    content = {"detail": "Server Error"}
    if settings.debug:
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Creates the database file if needed and applies migrations.
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Raises ``RuntimeError`` when no signing secret is configured outside
    debug mode.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)
    check_secret_key(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageError)
    @app.exception_handler(QRCodeGenerationError)
    @app.exception_handler(sqlite3.Error)
    async def infrastructure_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        return _server_error(exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _server_error(exc)

    app.include_router(api_router, prefix="/api")

    app.mount(
        f"/{UPLOAD_URL_PREFIX}",
        StaticFiles(directory=get_upload_dir(), check_dir=False),
        name="uploads",
    )

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
