from __future__ import annotations

import logging
from collections.abc import Iterable

from mediastore.errors import StorageError
from mediastore.formats import check_format, validate_filename
from mediastore.models.upload import IncomingFile, StorageMode, UploadDescriptor
from mediastore.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class UploadDispatcher:
    """Single entry point for persisting uploaded files.

    Holds the backend chosen at startup and nothing else, so one instance is
    shared by every request.
    """

    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    @property
    def mode(self) -> StorageMode:
        return self.storage.mode

    def store(self, file: IncomingFile, context: dict | None = None) -> UploadDescriptor:
        """Validate ``file`` and hand it to the active backend.

        ``context`` is caller metadata (e.g. the product an image belongs
        to); it is only logged.

        Raises:
            InvalidFilename: the name is empty or contains a path separator.
            UnsupportedFormat: the extension is missing or not allowed.
            WriteFailure: local disk write failed.
            UploadFailure: the remote media host failed.
        """
        try:
            validate_filename(file.filename)
            check_format(file.filename)
        except StorageError as exc:
            logger.warning("Upload rejected: file=%r field=%s reason=%s", file.filename, file.field_name, exc)
            raise

        try:
            descriptor = self.storage.store(file)
        except StorageError:
            logger.exception("Upload failed: file=%r mode=%s", file.filename, self.mode.value)
            raise

        logger.info(
            "Upload stored: file=%r name=%s kind=%s mode=%s context=%s",
            file.filename,
            descriptor.generated_name,
            descriptor.resource_kind.value,
            self.mode.value,
            context or {},
        )
        return descriptor

    def store_many(self, files: Iterable[IncomingFile], context: dict | None = None) -> list[UploadDescriptor]:
        """Store files in order; the first failure propagates and earlier files stay stored."""
        return [self.store(file, context) for file in files]
