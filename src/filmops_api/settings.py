"""Settings for the FilmOps API."""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the FilmOps API.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) reads
    configuration values from a variety of sources including environment variables.

    This class automatically reads from:
    1. Environment variables (production)
    2. .env file (local development)

    Environment variable names are treated case-insensitively, but the canonical
    names used in this project are lowercase (database_url, jwt_secret).
    """

    # PostgreSQL
    database_url: str
    """PostgreSQL connection string for the back office database (required)."""

    db_min_pool_size: int = 2
    """Minimum number of pooled connections."""

    db_max_pool_size: int = 10
    """Maximum number of pooled connections."""

    db_command_timeout: float = 60.0
    """Query timeout in seconds."""

    # Authentication (tokens are issued elsewhere, this service only verifies them)
    jwt_secret: str
    """Shared secret used to verify Bearer tokens (required)."""

    jwt_algorithm: str = "HS256"
    """Signing algorithm expected on Bearer tokens."""

    # Web
    frontend_url: str = "http://localhost:3000"
    """Origin of the admin dashboard, allowed by CORS."""

    environment: Optional[str] = None
    """Deployment environment name (development, staging, production)."""

    # Logging
    log_level: str = "INFO"
    """Minimum level written to stdout."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",  # Load from .env file if it exists (local development)
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in the model
        validate_default=True,
    )
