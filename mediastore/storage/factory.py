import logging

from mediastore.models.upload import StorageMode
from mediastore.settings import Settings, settings as default_settings
from mediastore.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def get_storage(settings: Settings | None = None) -> StorageBackend:
    """Build the one backend this process will use.

    Call once at startup and inject the result; the mode is never looked
    at again afterwards.
    """
    settings = settings or default_settings
    mode = settings.storage_mode

    if mode == StorageMode.CLOUD:
        from mediastore.storage.cloud import CloudinaryStorage

        logger.info(
            "Using storage backend: cloud cloud_name=%s folder=%s",
            settings.cloudinary_cloud_name,
            settings.cloudinary_folder,
        )
        return CloudinaryStorage(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            verify_credentials=settings.cloudinary_verify_credentials,
        )

    from mediastore.storage.local import LocalStorage

    logger.info("Using storage backend: local dir=%s", settings.upload_dir)
    return LocalStorage(settings.upload_dir, url_prefix=settings.upload_url_prefix)
