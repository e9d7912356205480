from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from mediastore.models.upload import IncomingFile, UploadDescriptor
from mediastore.services.media_service import MediaService
from mediastore.services.upload_service import UploadDispatcher

logger = logging.getLogger(__name__)


def get_dispatcher(request: Request) -> UploadDispatcher:
    return request.app.state.dispatcher


def get_media_service(request: Request) -> MediaService:
    return request.app.state.media_service


def is_file(value: object) -> bool:
    return isinstance(value, UploadFile) and bool(value.filename)


async def read_incoming(upload: UploadFile, field_name: str) -> IncomingFile:
    content = await upload.read()
    return IncomingFile(
        filename=upload.filename or "",
        content=content,
        content_type=upload.content_type or "",
        field_name=field_name,
    )


async def store_files(request: Request, files: list[IncomingFile]) -> list[UploadDescriptor]:
    """Run the blocking dispatcher off the event loop."""
    dispatcher = get_dispatcher(request)
    context = {"path": request.url.path}
    return await run_in_threadpool(dispatcher.store_many, files, context)


def accept_upload(field_name: str) -> Callable[[Request], Awaitable[UploadDescriptor | None]]:
    """Dependency that stores the single file sent in ``field_name``.

    The descriptor is returned and also attached to ``request.state.upload``;
    ``None`` means the field was empty.  Storage errors propagate to the
    app's exception handler.
    """

    async def dependency(request: Request) -> UploadDescriptor | None:
        request.state.upload = None
        form = await request.form()
        upload = form.get(field_name)
        if not is_file(upload):
            logger.warning("No file in field %r for %s %s", field_name, request.method, request.url.path)
            return None
        incoming = await read_incoming(upload, field_name)
        (descriptor,) = await store_files(request, [incoming])
        request.state.upload = descriptor
        return descriptor

    return dependency
