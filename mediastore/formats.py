"""Filename checks and content sniffing shared by every storage backend."""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image

from mediastore.errors import InvalidFilename, UnsupportedFormat
from mediastore.models.upload import ALLOWED_FORMATS, IMAGE_FORMATS, VIDEO_FORMATS, ResourceKind

logger = logging.getLogger(__name__)

_PILLOW_FORMATS = ("JPEG", "PNG", "GIF", "WEBP")

# ISO base media (mp4/mov) boxes that may open a file, at offset 4
_ISO_BMFF_BOXES = (b"ftyp", b"moov", b"mdat", b"wide", b"free")
# Matroska / WebM
_EBML_MAGIC = b"\x1a\x45\xdf\xa3"


def validate_filename(filename: str) -> str:
    """Return ``filename`` unchanged or raise ``InvalidFilename``.

    The name is used verbatim inside the uploads folder, so anything that
    could point outside of it is refused rather than rewritten.
    """
    if not filename or not filename.strip():
        raise InvalidFilename("Filename is empty")
    if "/" in filename or "\\" in filename:
        raise InvalidFilename(f"Filename must not contain path separators: {filename!r}")
    if "\x00" in filename:
        raise InvalidFilename("Filename must not contain NUL bytes")
    if filename in (".", ".."):
        raise InvalidFilename(f"Invalid filename: {filename!r}")
    return filename


def extension_of(filename: str) -> str:
    """Lower-cased extension without the dot, or ``""`` when there is none."""
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


def check_format(filename: str) -> str:
    ext = extension_of(filename)
    if not ext:
        raise UnsupportedFormat(f"File has no extension: {filename!r}")
    if ext not in ALLOWED_FORMATS:
        raise UnsupportedFormat(f"Format '{ext}' is not allowed. Allowed: {', '.join(sorted(ALLOWED_FORMATS))}")
    return ext


def kind_for_extension(ext: str) -> ResourceKind:
    if ext in IMAGE_FORMATS:
        return ResourceKind.IMAGE
    if ext in VIDEO_FORMATS:
        return ResourceKind.VIDEO
    return ResourceKind.OTHER


def sniff_resource_kind(content: bytes) -> ResourceKind:
    """Detect image vs. video from the leading bytes of ``content``."""
    if len(content) >= 8 and content[4:8] in _ISO_BMFF_BOXES:
        return ResourceKind.VIDEO
    if content.startswith(_EBML_MAGIC):
        return ResourceKind.VIDEO
    if not content:
        return ResourceKind.OTHER
    try:
        with Image.open(BytesIO(content), formats=_PILLOW_FORMATS) as img:
            logger.debug("Sniffed image format %s", img.format)
            return ResourceKind.IMAGE
    except (OSError, ValueError, EOFError, Image.DecompressionBombError):
        # Oversized or truncated headers fall back to the extension.
        return ResourceKind.OTHER


def detect_resource_kind(content: bytes, filename: str) -> ResourceKind:
    """Sniff the content; fall back to the extension when it is not recognised."""
    kind = sniff_resource_kind(content)
    if kind is ResourceKind.OTHER:
        return kind_for_extension(extension_of(filename))
    return kind
