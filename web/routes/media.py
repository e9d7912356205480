from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from mediastore.models.upload import UploadDescriptor
from web.deps import accept_upload, get_media_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/admin/media")
async def media_list(request: Request):
    items = get_media_service(request).list_media()
    logger.info("GET /api/admin/media: %d files", len(items))
    return [item.model_dump(mode="json") for item in items]


@router.post("/api/admin/media")
async def media_upload(request: Request, descriptor: UploadDescriptor | None = Depends(accept_upload("file"))):
    if descriptor is None:
        return JSONResponse({"message": "No file"}, status_code=400)
    logger.info("Admin media upload: %s (%s)", descriptor.generated_name, descriptor.original_name)
    return JSONResponse({"filename": descriptor.generated_name, "url": descriptor.url}, status_code=201)


@router.delete("/api/admin/media/{filename:path}")
async def media_delete(request: Request, filename: str):
    deleted = get_media_service(request).delete_media(filename)
    logger.info("Admin media delete: %s", deleted)
    return {"message": "Deleted"}

