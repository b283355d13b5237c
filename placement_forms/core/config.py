"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_forms"

    # JWT Auth (tokens are issued by the account service, we only verify them)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Object storage for file-type answers (S3-compatible)
    storage_endpoint: str = "http://localhost:9000"
    storage_access_key: str = "placement"
    storage_secret_key: str = "placement-secret-key"
    storage_bucket: str = "form-uploads"
    storage_public_url: str = ""
    max_upload_size_mb: int = 10

    # Form engine policies
    allow_multiple_submissions: bool = True
    cascade_delete_responses: bool = False

    # App
    log_level: str = "INFO"

    @property
    def public_storage_url(self) -> str:
        """Base URL that uploaded files are served from."""
        base = self.storage_public_url or f"{self.storage_endpoint}/{self.storage_bucket}"
        return base.rstrip("/")

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
