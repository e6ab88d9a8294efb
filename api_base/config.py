"""API base configuration via environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """API base layer configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="API_",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not in this model
    )

    # Service settings
    service_name: str = "api"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    # Pagination settings
    per_page_default: int = Field(default=20, ge=1, description="Page size when no limit is given")
    per_page_max: int = Field(default=50, ge=1, description="Upper bound for any requested limit")
    cursor_max_length: int = Field(default=64, ge=4, description="Longest cursor token accepted")

    # Versioning settings
    api_version: str = "1"
    version_header: str = "api-version"

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_methods: list[str] = ["HEAD", "GET", "POST", "PUT", "PATCH", "DELETE"]
    cors_headers: list[str] = [
        "Content-Type",
        "Accept",
        "Authorization",
        "X-Requested-With",
        "Application",
    ]

    @property
    def effective_per_page_default(self) -> int:
        """Default page size, never above the configured maximum."""
        return min(self.per_page_default, self.per_page_max)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
