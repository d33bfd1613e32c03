"""Deployment configuration for the web service stack.

Settings are read once by the CDK entry point from environment variables or a
local ``.env`` file and handed to the stack explicitly. Values are checked for
presence only: an empty or malformed value is forwarded as-is and left for
CloudFormation to reject at deploy time.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebServiceSettings(BaseSettings):
    """Configuration for the web service deployment.

    Args:
        certificate_arn: ACM certificate ARN used by the HTTPS listener.
        port: Application port injected into the container environment.
        database_url: Database connection string injected as plain environment.
        database_url_secret_name: Secrets Manager secret holding the connection
            string; when set the container resolves it at start-up instead.
        ecr_repo: ARN of the ECR repository holding the application image.
        image_tag: Image tag to deploy.
        allow_ssh_ingress: Whether the security group keeps the port 22 rule.
        log_level: Log level for the CDK entry point.

    Returns:
        A validated settings object sourced from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    certificate_arn: str = Field(
        description="ACM certificate ARN for the HTTPS listener",
    )

    port: str = Field(
        description="Application listening port passed to the container",
    )

    database_url: Optional[str] = Field(
        default=None,
        description="Database connection string passed to the container",
    )

    database_url_secret_name: Optional[str] = Field(
        default=None,
        description="Secrets Manager secret name holding the database connection string",
    )

    ecr_repo: str = Field(
        description="ECR repository ARN the container image is pulled from",
    )

    image_tag: str = Field(default="latest", description="Container image tag")

    allow_ssh_ingress: bool = Field(
        default=True,
        description="Keep the unrestricted port 22 ingress rule",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    @model_validator(mode="after")
    def check_database_source(self) -> "WebServiceSettings":
        """Require exactly one source for the database connection string."""
        if self.database_url is None and self.database_url_secret_name is None:
            raise ValueError(
                "DATABASE_URL or DATABASE_URL_SECRET_NAME must be provided"
            )
        if self.database_url is not None and self.database_url_secret_name is not None:
            raise ValueError(
                "DATABASE_URL and DATABASE_URL_SECRET_NAME are mutually exclusive"
            )
        return self

    @property
    def uses_database_secret(self) -> bool:
        """Whether the connection string is resolved from Secrets Manager."""
        return self.database_url_secret_name is not None


# Global settings instance
_settings: Optional[WebServiceSettings] = None


def get_settings() -> WebServiceSettings:
    """Get the cached settings instance, loading it on first use.

    Raises:
        pydantic.ValidationError: If a required value is missing.
    """
    global _settings
    if _settings is None:
        _settings = WebServiceSettings()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call reloads the environment."""
    global _settings
    _settings = None
