import logging
import time
from pathlib import Path
from urllib.parse import quote

from mediastore.errors import WriteFailure
from mediastore.formats import detect_resource_kind
from mediastore.models.upload import IncomingFile, StorageMode, UploadDescriptor
from mediastore.storage.base import StorageBackend

logger = logging.getLogger(__name__)

MAX_NAME_ATTEMPTS = 1000


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class LocalStorage(StorageBackend):
    mode = StorageMode.LOCAL

    def __init__(self, base_dir: str, url_prefix: str = "/uploads") -> None:
        # The folder is created by whoever starts the process, not here.
        self.base_dir = Path(base_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def store(self, file: IncomingFile) -> UploadDescriptor:
        kind = detect_resource_kind(file.content, file.filename)
        path = self._create_exclusive(file)
        resolved = str(path.resolve())
        logger.debug("Saved %s (%d bytes, %s) to %s", file.filename, file.size, kind.value, resolved)
        return UploadDescriptor(
            generated_name=path.name,
            location=resolved,
            url=f"{self.url_prefix}/{quote(path.name)}",
            resource_kind=kind,
            original_name=file.filename,
            size=file.size,
        )

    def _create_exclusive(self, file: IncomingFile) -> Path:
        """Write to ``<millis>-<name>``; bump the millis while the name is taken."""
        millis = _epoch_millis()
        for attempt in range(MAX_NAME_ATTEMPTS):
            path = self.base_dir / f"{millis + attempt}-{file.filename}"
            try:
                fh = path.open("xb")
            except FileExistsError:
                logger.debug("Name %s already taken, retrying", path.name)
                continue
            except OSError as exc:
                raise WriteFailure(f"Cannot create {path}: {exc}") from exc
            try:
                with fh:
                    fh.write(file.content)
            except OSError as exc:
                path.unlink(missing_ok=True)
                raise WriteFailure(f"Cannot write {path}: {exc}") from exc
            return path
        raise WriteFailure(f"No free name for {file.filename} after {MAX_NAME_ATTEMPTS} attempts")
