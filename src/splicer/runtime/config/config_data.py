"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, computed_field

DEV_SIGNING_SECRET = "dev-signing-secret-change-me"


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RateLimiterConfig(BaseModel):
    """Rate limiter configuration model."""

    requests: int = Field(
        default=30, description="Number of requests allowed per window"
    )
    window_ms: int = Field(default=60000, description="Time window in milliseconds")
    enabled: bool = Field(default=True, description="Enable rate limiting")
    per_endpoint: bool = Field(default=True, description="Separate quota per route")
    per_method: bool = Field(default=True, description="Separate quota per HTTP method")


class JWTClaimsConfig(BaseModel):
    """JWT claims mapping configuration."""

    user_id: str = Field(
        default="sub", description="Claim name for user ID (usually 'sub')"
    )
    email: str = Field(default="email", description="Claim name for email address")
    roles: str = Field(
        default="roles", description="Claim name for user roles/permissions"
    )
    name: str = Field(default="name", description="Claim name for user's full name")


class JWTConfig(BaseModel):
    """JWT validation configuration."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    gen_issuer: str = Field(
        default="splicer-api", description="Issuer name to use when generating tokens"
    )
    audiences: list[str] = Field(
        default_factory=lambda: ["api://splicer"],
        description="JWT audiences that this API accepts",
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    claims: JWTClaimsConfig = Field(
        default_factory=JWTClaimsConfig, description="JWT claims mapping configuration"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./splicer.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    create_tables: bool = Field(
        default=False, description="Create missing tables on application startup"
    )

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL points at SQLite."""
        return self.url.startswith("sqlite")


class DealRulesConfig(BaseModel):
    """Business bounds applied to deal forms and the participation lifecycle."""

    min_quantity: int = Field(default=1, description="Minimum units per participant")
    max_quantity: int = Field(default=100, description="Maximum units per participant")
    max_notes_length: int = Field(default=500, description="Maximum length of join notes")
    max_title_length: int = Field(default=100, description="Maximum deal title length")
    min_target_participants: int = Field(default=2)
    max_target_participants: int = Field(default=1000)
    min_discount_percentage: Decimal = Field(default=Decimal("1"))
    max_discount_percentage: Decimal = Field(default=Decimal("80"))
    min_duration_hours: int = Field(default=1)
    max_duration_hours: int = Field(default=720, description="30 days")
    max_write_attempts: int = Field(
        default=3,
        description="Attempts for a deal write before a version conflict is reported",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    session_signing_secret: str = Field(
        default=DEV_SIGNING_SECRET, description="Secret for signing bearer JWTs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    rate_limiter: RateLimiterConfig = Field(
        default_factory=RateLimiterConfig, description="Rate limiter configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT validation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    deals: DealRulesConfig = Field(
        default_factory=DealRulesConfig, description="Deal business rules"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
