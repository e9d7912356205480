from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from mediastore.errors import (
    InvalidFilename,
    MediaNotFound,
    StorageError,
    UnsupportedFormat,
    UploadFailure,
    WriteFailure,
)
from mediastore.logging import configure_logging
from mediastore.models.upload import StorageMode
from mediastore.services.media_service import MediaService
from mediastore.services.upload_service import UploadDispatcher
from mediastore.settings import settings
from mediastore.storage.factory import get_storage
from web.routes.media import router as media_router
from web.routes.upload import router as upload_router

configure_logging()
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[StorageError], int] = {
    InvalidFilename: 400,
    UnsupportedFormat: 400,
    MediaNotFound: 404,
    WriteFailure: 500,
    UploadFailure: 502,
}


def _mount_uploads(app: FastAPI) -> None:
    """Serve the uploads folder at UPLOAD_URL_PREFIX, in local mode only."""
    # Replace the mount left by an earlier startup of the same app.
    app.router.routes[:] = [r for r in app.router.routes if getattr(r, "name", None) != "uploads"]
    if settings.storage_mode is StorageMode.LOCAL:
        app.mount(
            settings.upload_url_prefix.rstrip("/"),
            StaticFiles(directory=settings.upload_dir, check_dir=False),
            name="uploads",
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    # ConfigurationError escapes here and stops the server before it serves anything.
    app.state.dispatcher = UploadDispatcher(get_storage(settings))
    app.state.media_service = MediaService(settings.upload_dir, url_prefix=settings.upload_url_prefix)
    _mount_uploads(app)
    logger.info("Application started (storage=%s)", app.state.dispatcher.mode.value)
    yield


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.include_router(upload_router)
app.include_router(media_router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    logger.warning(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse({"message": str(exc), "error": type(exc).__name__}, status_code=status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"message": "Internal Server Error"}, status_code=500)
