import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mediastore.models.upload import StorageMode

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    storage_mode: StorageMode = StorageMode.LOCAL

    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"

    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "ecommerce-products"
    cloudinary_verify_credentials: bool = True

    web_host: str = "127.0.0.1"
    web_port: int = 8000

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("storage_mode", mode="before")
    @classmethod
    def _resolve_storage_mode(cls, value: object) -> StorageMode:
        if isinstance(value, StorageMode):
            return value
        raw = str(value or "").strip().lower()
        if not raw:
            return StorageMode.LOCAL
        try:
            return StorageMode(raw)
        except ValueError:
            logger.warning("Unknown STORAGE_MODE %r, falling back to local storage", value)
            return StorageMode.LOCAL


settings = Settings()
