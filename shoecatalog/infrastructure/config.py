"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False
    public_base_url: str = "http://localhost:8000"

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"

    # Blob storage
    blob_backend: str = "filesystem"  # "filesystem" or "memory"
    blob_storage_path: str = "./storage"
    images_bucket: str = "uploads"
    documents_bucket: str = "pdfs"

    # Images
    max_upload_bytes: int = 10 * 1024 * 1024
    image_max_edge: int = 1200
    image_jpeg_quality: int = 90
    image_fetch_timeout: float = 10.0
    image_fetch_concurrency: int = 4

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
