"""Configuration for the BPA starter service.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Unlike a typical client setup, no token is required at startup: requests served
over HTTP forward the caller's bearer token to the engine, and the service token
below is only used for calls made outside a request (CLI, background jobs).
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bpa_backend_starter.workflow.constants import ACTIVITI_MODULE_NAME


class BpaSettings(BaseSettings):
    """Settings for the BPA client, the event workers and the REST server.

    Environment variables:
    - BPA_BASE_URL         (optional)
    - BPA_SERVICE_TOKEN    (optional)
    - BPA_MODULE_NAME      (optional)
    - BPA_TIMEOUT_SECONDS  (optional)
    - BPA_EVENT_WORKERS    (optional)
    - BPA_CORS_ORIGINS     (optional)
    - LOG_LEVEL            (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `BpaSettings(_env_file=path_to_env)`.
    """

    base_url: str = Field(
        default="http://localhost:8081",
        validation_alias="BPA_BASE_URL",
        description="Base URL of the business-process-automation engine",
    )
    service_token: str = Field(
        default="",
        validation_alias="BPA_SERVICE_TOKEN",
        description="Token forwarded to the engine when no request token is bound",
    )
    module_name: str = Field(
        default=ACTIVITI_MODULE_NAME,
        validation_alias="BPA_MODULE_NAME",
        description="Engine module the process definitions live in",
    )
    timeout_seconds: float = Field(
        default=30.0,
        validation_alias="BPA_TIMEOUT_SECONDS",
        description="HTTP timeout (seconds) for calls to the engine",
        gt=0,
    )
    event_workers: int = Field(
        default=4,
        validation_alias="BPA_EVENT_WORKERS",
        description="Number of worker threads delivering After/Abort workflow events",
        ge=1,
        le=64,
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    cors_origins: str = Field(
        default="",
        validation_alias="BPA_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    @property
    def api_base_url(self) -> str:
        """Engine base URL without a trailing slash."""

        return self.base_url.rstrip("/")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
