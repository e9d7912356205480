"""Error taxonomy for the upload pipeline.

Every failure surfaces as a ``StorageError`` subclass.  ``ConfigurationError``
is raised while building the backend and must abort startup; the rest are
scoped to a single upload or media request.
"""


class StorageError(Exception):
    """Base class for every upload/storage failure."""


class InvalidFilename(StorageError, ValueError):
    """The original filename is empty or could escape the uploads folder."""


class UnsupportedFormat(StorageError, ValueError):
    """The file extension is missing or not in the allowed format set."""


class ConfigurationError(StorageError):
    """The storage backend cannot be built from the current settings."""


class WriteFailure(StorageError):
    """Writing to the local uploads folder failed."""


class UploadFailure(StorageError):
    """The remote media host rejected the upload or could not be reached."""


class MediaNotFound(StorageError):
    """The requested media file does not exist."""
