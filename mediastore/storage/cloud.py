from __future__ import annotations

import logging
from io import BytesIO

try:
    import cloudinary.api
    import cloudinary.uploader
    from cloudinary.exceptions import Error as CloudinaryError
except ImportError:  # pragma: no cover
    cloudinary = None  # type: ignore[assignment]
    CloudinaryError = None  # type: ignore[assignment,misc]

from mediastore.errors import ConfigurationError, UploadFailure
from mediastore.models.upload import ALLOWED_FORMATS, IncomingFile, ResourceKind, StorageMode, UploadDescriptor
from mediastore.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_RESOURCE_KINDS = {
    "image": ResourceKind.IMAGE,
    "video": ResourceKind.VIDEO,
}


class CloudinaryStorage(StorageBackend):
    mode = StorageMode.CLOUD

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "ecommerce-products",
        verify_credentials: bool = True,
    ) -> None:
        missing = [
            name
            for name, value in (
                ("CLOUDINARY_CLOUD_NAME", cloud_name),
                ("CLOUDINARY_API_KEY", api_key),
                ("CLOUDINARY_API_SECRET", api_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Cloud storage needs {', '.join(missing)}")

        if cloudinary is None:
            raise ConfigurationError(
                "cloudinary is required for cloud storage. "
                "Install it with: pip install mediastore[cloud]"
            )

        self.folder = folder
        # Passed on every call so the SDK's global config is never touched.
        self._credentials = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }

        if verify_credentials:
            self._ping()

    def _ping(self) -> None:
        try:
            cloudinary.api.ping(**self._credentials)
        except (CloudinaryError, OSError) as exc:
            raise ConfigurationError(f"Cloudinary rejected the credentials: {exc}") from exc
        logger.info("Cloudinary credentials verified for cloud=%s", self._credentials["cloud_name"])

    def store(self, file: IncomingFile) -> UploadDescriptor:
        try:
            result = cloudinary.uploader.upload(
                BytesIO(file.content),
                filename=file.filename,
                folder=self.folder,
                resource_type="auto",
                allowed_formats=sorted(ALLOWED_FORMATS),
                **self._credentials,
            )
        except (CloudinaryError, OSError) as exc:
            raise UploadFailure(f"Upload of {file.filename} failed: {exc}") from exc

        public_id = result.get("public_id") or ""
        secure_url = result.get("secure_url") or ""
        if not public_id or not secure_url:
            raise UploadFailure(f"Upload of {file.filename} returned an incomplete response")

        kind = _RESOURCE_KINDS.get(result.get("resource_type", ""), ResourceKind.OTHER)
        logger.info(
            "Uploaded %s to cloudinary as %s (%s, %d bytes)",
            file.filename,
            public_id,
            kind.value,
            file.size,
        )
        return UploadDescriptor(
            generated_name=public_id,
            location=secure_url,
            url=secure_url,
            resource_kind=kind,
            original_name=file.filename,
            size=result.get("bytes", file.size),
        )
