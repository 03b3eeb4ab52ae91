"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Remote catalog
    catalog_api_url: str = Field(
        default="https://mobilinxbd.vercel.app/api/v1",
        description="Base URL of the remote catalog REST API",
    )
    catalog_api_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Remote catalog request timeout in seconds",
    )

    # Landing page
    brand_shelf_size: int = Field(default=8, ge=1)
    featured_series_size: int = Field(default=16, ge=1)

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
