from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote, unquote

from mediastore.errors import InvalidFilename, MediaNotFound
from mediastore.models.media import MediaItem

logger = logging.getLogger(__name__)

_UPLOADS_PREFIX_RE = re.compile(r"^/?uploads/", re.IGNORECASE)


def sanitize_media_name(raw: str) -> str:
    """Reduce a client supplied name or URL path to a bare filename."""
    decoded = unquote(raw or "")
    decoded = _UPLOADS_PREFIX_RE.sub("", decoded).lstrip("/")
    filename = decoded.rsplit("/", 1)[-1]
    if filename in ("", ".") or ".." in filename or "/" in filename or "\\" in filename:
        raise InvalidFilename(f"Invalid filename: {raw!r}")
    return filename


class MediaService:
    """Admin view over the local uploads folder."""

    def __init__(self, base_dir: str, url_prefix: str = "/uploads") -> None:
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def list_media(self) -> list[MediaItem]:
        if not self.base_dir.is_dir():
            logger.debug("Uploads folder %s does not exist", self.base_dir)
            return []
        items = []
        for path in self.base_dir.iterdir():
            if not path.is_file():
                continue
            stat = path.stat()
            items.append(
                MediaItem(
                    filename=path.name,
                    size=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                    url=f"{self.url_prefix}/{quote(path.name)}",
                )
            )
        items.sort(key=lambda item: item.modified_at, reverse=True)
        logger.debug("Listed %d media files", len(items))
        return items

    def delete_media(self, raw_name: str) -> str:
        filename = sanitize_media_name(raw_name)
        path = self.base_dir / filename
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise MediaNotFound(f"File not found: {filename}") from exc
        logger.info("Media deleted: %s", filename)
        return filename
