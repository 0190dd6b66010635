"""Configuration management for URL shortener."""

from typing import Dict, List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field


class Config(BaseSettings):
    """Application configuration."""

    # Database settings
    database_url: str = Field(
        ...,
        description="Store connection URL (mongodb://... or memory://)"
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=8000,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes"
    )

    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma separated origins allowed by CORS"
    )

    frontend_url: Optional[str] = Field(
        default=None,
        description="Frontend origin, added to the CORS origins"
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("base_url", "app_url"),
        description="Base URL for generating short URLs"
    )

    short_code_length: int = Field(
        default=7,
        description="Length of generated short codes"
    )

    max_collision_retries: int = Field(
        default=5,
        description="Maximum attempts when generating short codes"
    )

    default_validity_minutes: int = Field(
        default=30,
        gt=0,
        description="Validity window when the request gives none"
    )

    max_validity_minutes: int = Field(
        default=43200,
        gt=0,
        description="Largest accepted validity window (30 days)"
    )

    stats_default_limit: int = Field(
        default=50,
        gt=0,
        description="Page size for /api/stats when no limit is given"
    )

    stats_max_limit: int = Field(
        default=1000,
        gt=0,
        description="Hard cap on the /api/stats page size"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    # Remote log collector (optional)
    remote_log_url: Optional[str] = Field(
        default=None,
        description="Remote log collector base URL; unset disables remote logging"
    )
    remote_log_email: Optional[str] = None
    remote_log_name: Optional[str] = None
    remote_log_roll_no: Optional[str] = None
    remote_log_access_code: Optional[str] = None
    remote_log_client_id: Optional[str] = None
    remote_log_client_secret: Optional[str] = None

    remote_log_stack: str = Field(
        default="backend",
        description="Stack name reported to the collector"
    )

    remote_log_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for collector calls"
    )

    remote_log_max_failures: int = Field(
        default=5,
        ge=1,
        description="Consecutive failures before remote logging pauses"
    )

    remote_log_cooldown_minutes: float = Field(
        default=5,
        ge=0,
        description="How long remote logging pauses after repeated failures"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
        "populate_by_name": True,
    }

    @property
    def allowed_origins(self) -> List[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins

    @property
    def remote_log_credentials(self) -> Dict[str, Optional[str]]:
        """Body posted to the collector's /auth endpoint."""
        return {
            "email": self.remote_log_email,
            "name": self.remote_log_name,
            "rollNo": self.remote_log_roll_no,
            "accessCode": self.remote_log_access_code,
            "clientID": self.remote_log_client_id,
            "clientSecret": self.remote_log_client_secret,
        }


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
