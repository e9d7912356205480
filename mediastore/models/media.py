from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class MediaItem(BaseModel):
    filename: str
    size: int = 0
    modified_at: datetime
    url: str
