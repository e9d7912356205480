from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from mediastore.models.upload import UploadDescriptor
from web.deps import accept_upload, is_file, read_incoming, store_files

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

PRODUCT_MEDIA_LIMITS = {"images": 8, "video": 1}


def _no_file() -> JSONResponse:
    return JSONResponse({"message": "No file uploaded"}, status_code=400)


@router.post("/upload")
async def upload_image(request: Request, descriptor: UploadDescriptor | None = Depends(accept_upload("image"))):
    if descriptor is None:
        return _no_file()
    logger.info("POST /api/upload: stored %s", descriptor.generated_name)
    return {"url": descriptor.url}


@router.post("/upload/file")
async def upload_file(request: Request, descriptor: UploadDescriptor | None = Depends(accept_upload("file"))):
    if descriptor is None:
        return _no_file()
    logger.info("POST /api/upload/file: stored %s", descriptor.generated_name)
    return {"url": descriptor.url, "filename": descriptor.generated_name}


@router.post("/products/media")
async def upload_product_media(request: Request):
    """Product form upload: up to 8 ``images`` and one ``video``."""
    form = await request.form()

    uploads: dict[str, list] = {}
    for field_name, limit in PRODUCT_MEDIA_LIMITS.items():
        files = [f for f in form.getlist(field_name) if is_file(f)]
        if len(files) > limit:
            logger.warning("Product media rejected: %d files in %r (max %d)", len(files), field_name, limit)
            return JSONResponse(
                {"message": f"Too many files for '{field_name}' (max {limit})"},
                status_code=400,
            )
        uploads[field_name] = files

    if not any(uploads.values()):
        return _no_file()

    images = await store_files(request, [await read_incoming(f, "images") for f in uploads["images"]])
    videos = await store_files(request, [await read_incoming(f, "video") for f in uploads["video"]])

    logger.info("POST /api/products/media: stored %d images, %d videos", len(images), len(videos))
    return {
        "images": [d.url for d in images],
        "video_url": videos[0].url if videos else None,
    }
