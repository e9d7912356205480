from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StorageMode(str, Enum):
    LOCAL = "local"
    CLOUD = "cloud"


class ResourceKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    OTHER = "other"


class IncomingFile(BaseModel):
    filename: str
    content: bytes = b""
    content_type: str = ""  # as declared by the client, never trusted
    field_name: str = "file"

    @property
    def size(self) -> int:
        return len(self.content)


class UploadDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    url: str
    resource_kind: ResourceKind
    original_name: str
    size: int = 0


ALLOWED_FORMATS = frozenset({"jpg", "jpeg", "png", "webp", "gif", "mp4", "webm", "mov", "mkv"})

IMAGE_FORMATS = frozenset({"jpg", "jpeg", "png", "webp", "gif"})
VIDEO_FORMATS = frozenset({"mp4", "webm", "mov", "mkv"})
