"""Environment-based configuration for the extraction service."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """docharvest settings, loaded from environment variables."""

    # Server
    PORT: int = 8092
    LOG_LEVEL: str = "INFO"

    # Reject uploaded documents larger than this (bytes, UTF-8 encoded)
    MAX_DOCUMENT_BYTES: int = 5 * 1024 * 1024

    # Run the transform chains of different fields concurrently
    TRANSFORM_CONCURRENT_FIELDS: bool = True

    model_config = {"env_prefix": "", "case_sensitive": True}


settings = Settings()
