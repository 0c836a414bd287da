import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class StorageSettings(BaseSettings):
    """Credentials and location of the R2 / S3-compatible photo bucket.

    Every credential is required; there are deliberately no fallbacks.
    """

    account_id: str = Field(min_length=1)
    access_key_id: str = Field(min_length=1)
    secret_access_key: str = Field(min_length=1)
    bucket_name: str = Field(min_length=1)
    public_url: str = Field(min_length=1, description="Public base URL photos are served from")
    endpoint: str | None = None
    region: str = "auto"
    signature_version: str = "s3v4"
    list_max_keys: int = Field(default=1000, ge=1, le=1000)

    model_config = SettingsConfigDict(
        env_prefix="R2_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def endpoint_url(self) -> str:
        if self.endpoint:
            if not self.endpoint.startswith(("http://", "https://")):
                return f"https://{self.endpoint}"
            return self.endpoint
        return f"https://{self.account_id}.r2.cloudflarestorage.com"

    @property
    def base_url(self) -> str:
        return self.public_url.rstrip("/")


class ManifestSettings(BaseSettings):
    """Limits and cache lifetimes for the manifest and proxy endpoints"""

    max_photos: int = Field(default=500, ge=1)
    cache_max_age: int = Field(default=300, ge=0)
    photo_cache_max_age: int = Field(default=31536000, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="MANIFEST_",
        env_file=".env",
        extra="ignore",
    )


class SiteSettings(BaseSettings):
    """Branding used when rendering SEO metadata, plus browser-facing policy"""

    name: str = "Photography Portfolio"
    social_handle: str | None = None
    fallback_subjects: str = "stunning landscapes, portraits, and street photography"
    cors_origins: list[str] = ["*"]
    disable_context_menu: bool = True
    disable_text_selection: bool = True
    block_devtools_shortcuts: bool = False

    model_config = SettingsConfigDict(
        env_prefix="SITE_",
        env_file=".env",
        extra="ignore",
    )


class LoggingSettings(BaseSettings):
    """Verbosity and output style of the stdout log handlers"""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    colored: bool = True
    quiet_libraries: bool = True

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value


def load_storage_settings() -> StorageSettings:
    """Build StorageSettings from the environment.

    Raises:
        ConfigurationError: if any required variable is absent or invalid
    """
    try:
        return StorageSettings()
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        names = ", ".join(f"R2_{field.upper()}" for field in fields)
        raise ConfigurationError(f"Storage configuration missing or invalid: {names}") from e


@lru_cache(maxsize=1)
def get_manifest_settings() -> ManifestSettings:
    """Get cached manifest settings."""
    return ManifestSettings()


@lru_cache(maxsize=1)
def get_site_settings() -> SiteSettings:
    """Get cached site settings."""
    return SiteSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()
