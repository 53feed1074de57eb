# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to storage credentials, API endpoints, and import tuning

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from women_galaxy.errors import ConfigurationError


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="WOMEN_GALAXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Object storage
    supabase_url: str = Field(default="", description="Supabase project URL for profile photo storage")
    supabase_service_role_key: str = Field(default="", description="Supabase service role key")
    storage_bucket: str = Field(default="women-profiles", description="Bucket holding profile photos")
    storage_prefix: str = Field(default="women", description="Key prefix for uploaded photos")
    local_storage_dir: Path | None = Field(
        default=None, description="Store photos on the local filesystem instead of Supabase"
    )
    local_storage_base_url: str = Field(
        default="", description="Public base URL served for the local storage directory"
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./women_galaxy.db", description="Database URL for async profile storage"
    )

    # Upstream APIs
    wikipedia_api_url: str = Field(default="https://en.wikipedia.org/w/api.php")
    wikidata_api_url: str = Field(default="https://www.wikidata.org/w/api.php")
    user_agent: str = Field(
        default="WomenGalaxyBot/1.0 (https://lucyearth.com)", description="User-Agent sent to Wikimedia APIs"
    )
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    thumbnail_size: int = Field(default=500, description="Requested thumbnail width in pixels")
    category_limit: int = Field(default=20, description="Maximum category labels fetched per page")

    # Import behaviour
    import_delay_seconds: float = Field(default=0.2, ge=0.0, description="Pause between batch items")
    lenient_birth_year: bool = Field(
        default=False, description="Enable the low-confidence parenthesised-year fallback"
    )

    # Image processing
    image_max_dimension: int = Field(default=500, ge=16, description="Maximum width/height of stored photos")
    image_square_crop: bool = Field(default=True, description="Crop photos to a top-anchored square")
    image_quality: int = Field(default=82, ge=1, le=100, description="WebP quality")
    max_image_size_mb: float = Field(default=10.0, description="Largest image download accepted")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")

    @property
    def uses_local_storage(self) -> bool:
        return self.local_storage_dir is not None

    def require_storage(self) -> None:
        """Ensure some object store is configured.

        Raises:
            ConfigurationError: If neither Supabase credentials nor a local directory are set
        """
        if self.uses_local_storage:
            return
        missing = [
            name
            for name, value in (
                ("WOMEN_GALAXY_SUPABASE_URL", self.supabase_url),
                ("WOMEN_GALAXY_SUPABASE_SERVICE_ROLE_KEY", self.supabase_service_role_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing {' or '.join(missing)} environment variables "
                "(or set WOMEN_GALAXY_LOCAL_STORAGE_DIR)"
            )


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
