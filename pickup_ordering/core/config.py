"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Local SQLite database, default admin key accepted
    - STAGING: Pre-production settings, missing secrets are reported at startup
    - PRODUCTION: Live environment, missing secrets are reported at startup

Usage:
    from pickup_ordering.core.config import get_settings

    settings = get_settings()
    print(settings.database_url)

Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache
from typing import Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ADMIN_PASSWORD = "changeme"


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing
        PRODUCTION: Live environment
        STAGING: Pre-production testing
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    The admin password should NEVER be committed to version control.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Pick-up Ordering Service",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3000,
        description="API server port"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/app.db",
        description="SQLAlchemy async connection URL (sqlite+aiosqlite or postgresql+psycopg)"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )
    seed_menu: bool = Field(
        default=True,
        description="Insert the default menu when the catalog is empty"
    )

    # ==========================================================================
    # ADMIN
    # ==========================================================================

    admin_password: str = Field(
        default=DEFAULT_ADMIN_PASSWORD,
        description="Shared secret for the order review pages"
    )
    recent_orders_limit: int = Field(
        default=200,
        ge=1,
        description="Number of orders shown on the admin review page"
    )

    # ==========================================================================
    # RESTAURANT
    # ==========================================================================

    restaurant_name: str = Field(
        default="Pizza King Converse",
        description="Restaurant display name"
    )
    restaurant_address: str = Field(
        default="200 W Wabash St, Converse, IN 46919",
        description="Pick-up address"
    )
    restaurant_phone: str = Field(
        default="(765) 395-0000",
        description="Restaurant contact number"
    )
    restaurant_hours: Dict[str, str] = Field(
        default_factory=lambda: {
            "Monday": "11:00 AM - 9:00 PM",
            "Tuesday": "11:00 AM - 9:00 PM",
            "Wednesday": "11:00 AM - 9:00 PM",
            "Thursday": "11:00 AM - 9:00 PM",
            "Friday": "11:00 AM - 10:00 PM",
            "Saturday": "11:00 AM - 10:00 PM",
            "Sunday": "12:00 PM - 9:00 PM",
        },
        description="Opening hours by weekday (JSON object in the environment)"
    )

    # ==========================================================================
    # CLIENT CART STORAGE
    # ==========================================================================

    data_directory: str = Field(
        default="data",
        description="Directory for local data files"
    )
    cart_filename: str = Field(
        default="cart.json",
        description="Local cart file name"
    )
    cart_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for the cart file lock"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing or unsafe configuration keys (empty if all good)
        """
        missing = []

        if not self.is_development:
            if self.admin_password == DEFAULT_ADMIN_PASSWORD:
                missing.append("ADMIN_PASSWORD")
            if self.is_sqlite:
                missing.append("DATABASE_URL")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded only once per process; tests that change the
    environment call ``get_settings.cache_clear()``.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("pickup_ordering")
