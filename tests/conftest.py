"""Root conftest: clean environment and sample media payloads."""

from __future__ import annotations

import struct
import zlib
from io import BytesIO

import pytest
from PIL import Image

from mediastore.models.upload import IncomingFile

MP4_HEADER = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + b"\x00" * 16
MKV_HEADER = b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81\x01" + b"\x00" * 16


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


# Header-only PNG declaring 100000x100000 RGB pixels, far past Pillow's bomb limit.
HUGE_PNG_HEADER = (
    b"\x89PNG\r\n\x1a\n"
    + _png_chunk(b"IHDR", struct.pack(">IIBBBBB", 100000, 100000, 8, 2, 0, 0, 0))
    + _png_chunk(b"IEND", b"")
)

_ENV_VARS = (
    "STORAGE_MODE",
    "UPLOAD_DIR",
    "UPLOAD_URL_PREFIX",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
    "CLOUDINARY_FOLDER",
    "CLOUDINARY_VERIFY_CREDENTIALS",
    "LOG_LEVEL",
    "LOG_JSON",
    "WEB_HOST",
    "WEB_PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


def _make_image(fmt: str = "PNG") -> bytes:
    img = Image.new("RGB", (32, 24), color="red")
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def _incoming(filename: str = "photo.png", content: bytes | None = None, **overrides) -> IncomingFile:
    if content is None:
        content = _make_image()
    return IncomingFile(filename=filename, content=content, **overrides)


@pytest.fixture()
def png_bytes() -> bytes:
    return _make_image("PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _make_image("JPEG")


@pytest.fixture()
def make_image():
    return _make_image


@pytest.fixture()
def incoming():
    return _incoming
