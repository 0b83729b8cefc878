"""
Configuration for the cityCast API.

Supports multiple environments (development, staging, production) with
appropriate defaults. Environment variables and a local .env file override
the defaults below.
"""

from enum import Enum
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

load_dotenv()


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application settings with environment-specific defaults.

    Field names map one-to-one onto environment variables
    (case-insensitive), e.g. ``maps_key`` is read from ``MAPS_KEY``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )

    # API Configuration
    api_title: str = Field(default="cityCast API", description="API title for OpenAPI docs")
    api_version: str = Field(default="1.0.0", description="API version")
    debug: bool = Field(default=True, description="Enable debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload (development only)")

    # Upstream API keys
    maps_key: str = Field(default="", description="Google Maps key for the Geocoding API")
    places_api_key: str = Field(default="", description="Google key for Places Text Search")
    opentripmap_api_key: str = Field(default="", description="OpenTripMap API key")
    mollie_api_key: str = Field(default="", description="Mollie key (test_ or live_)")

    # Upstream endpoints
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    places_search_url: str = "https://places.googleapis.com/v1/places:searchText"
    opentripmap_base_url: str = "https://api.opentripmap.com/0.1/en/places"
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    mollie_base_url: str = "https://api.mollie.com/v2"
    http_timeout_seconds: float = Field(default=10.0, gt=0, le=60)

    # Record store
    repository_type: str = Field(default="duckdb", description="Record store backend")
    duckdb_db_path: str = Field(default="data/citycast.duckdb")

    # Navigation
    off_route_threshold_meters: float = Field(default=50.0, gt=0)

    # Site
    site_url: str = "https://stadtour.nl"

    # CORS Configuration (comma-separated)
    cors_origins: str = Field(default="*", description="Allowed CORS origins")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Enable JSON logging for production")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return v.upper()

    @model_validator(mode="after")
    def apply_environment_rules(self) -> "Settings":
        """Disable debug outside development and reload outside development."""
        if self.environment == Environment.PRODUCTION:
            self.debug = False
        if self.environment != Environment.DEVELOPMENT:
            self.reload = False
        return self

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins from the comma-separated setting."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_environment_display(self) -> str:
        """Get human-readable environment name."""
        return self.environment.value.title()

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION

    def get_cors_config(self) -> dict[str, Any]:
        """Get CORS configuration."""
        origins = self.cors_origin_list
        if self.is_production():
            # Restrictive CORS for production
            return {
                "allow_origins": [origin for origin in origins if origin != "*"],
                "allow_methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type", "X-Api-Key", "Authorization"],
            }
        return {
            "allow_origins": origins,
            "allow_methods": ["*"],
            "allow_headers": ["*"],
        }


# Global settings instance
settings = Settings()


def configure_structlog() -> None:
    """Initialize structlog with console output, or JSON lines in production."""
    import logging
    import sys

    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        stream=sys.stdout,
        force=True,
        format="%(message)s",
    )

    renderer: Any
    if settings.log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event_to=20)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso" if settings.log_json else "%H:%M:%S"),
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
