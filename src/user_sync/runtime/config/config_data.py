"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field, field_validator


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @field_validator("file", mode="before")
    @classmethod
    def _empty_file_is_none(cls, value: str | None) -> str | None:
        return value or None


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./user_sync.db",
        description="Database connection URL",
    )
    environment_mode: Literal["development", "production", "test"] = Field(
        default="development", description="Environment mode: development, production or test"
    )
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. Outside production, use whatever the URL carries
        2. In production, read from the mounted secrets file given by `password_file`
           or the environment variable named by `password_env_var`
        """
        from sqlalchemy.engine import make_url

        if self.is_sqlite:
            return None

        if self.environment_mode != "production":
            return make_url(self.url).password

        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if password:
                return password
            raise ValueError(f"Environment variable {self.password_env_var} not set")

        # Fall back to a password embedded in the URL
        return make_url(self.url).password

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        from sqlalchemy.engine import make_url

        if self.is_sqlite:
            return self.url

        base_url = make_url(self.url)
        resolved_password = self.password

        if base_url.password and self.environment_mode == "production":
            logger.warning(
                "Database URL contains a password in production mode; "
                "consider using a secrets file or environment variable."
            )

        if resolved_password and resolved_password != base_url.password:
            base_url = base_url.set(password=resolved_password)

        return base_url.render_as_string(hide_password=False)


class ClerkWebhookConfig(BaseModel):
    """Clerk (Svix-signed) webhook configuration."""

    signing_secret: str | None = Field(
        default=None,
        description="Svix signing secret from the Clerk dashboard (whsec_...)",
    )

    @field_validator("signing_secret", mode="before")
    @classmethod
    def _blank_secret_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def is_configured(self) -> bool:
        return self.signing_secret is not None


class WebhooksConfig(BaseModel):
    """Inbound webhook configuration."""

    clerk: ClerkWebhookConfig = Field(
        default_factory=ClerkWebhookConfig, description="Clerk webhook configuration"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    title: str = Field(default="User Sync Service", description="API title")
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    webhooks: WebhooksConfig = Field(
        default_factory=WebhooksConfig, description="Inbound webhook configuration"
    )
