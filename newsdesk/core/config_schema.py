"""
Settings File Schemas.

One model per file in config/settings/, validated when AppConfig loads:

    application.yaml  ApplicationSchema
    backend.yaml      BackendSchema
    analytics.yaml    AnalyticsSchema
    logging.yaml      LoggingSchema

Unknown keys are rejected so a misspelt setting fails at startup rather
than silently falling back to a default.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictBase(BaseModel):
    """Rejects keys the schema does not declare."""

    model_config = ConfigDict(extra="forbid")


def _path_prefix(value: str) -> str:
    """Normalize "", "/", "desk/" and "/desk/" to "" or "/desk"."""
    value = value.strip().strip("/")
    return f"/{value}" if value else ""


# --- application.yaml --------------------------------------------------------


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(gt=0, lt=65536)


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    external_api: int = Field(gt=0, description="Seconds allowed for readiness checks")


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    base_path: str = Field(description="Prefix the pages are served under")
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema

    @field_validator("api_prefix", "base_path")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        return _path_prefix(value)


# --- backend.yaml ------------------------------------------------------------


class EndpointsSchema(_StrictBase):
    tags: str = Field(description="Tag collection path")
    records: str = Field(description="Record collection path; /{id} is appended for linking")


class RetrySchema(_StrictBase):
    max_retries: int = Field(ge=0, description="Extra attempts after the first")
    delay_seconds: float = Field(ge=0, description="Constant wait between attempts")


class BackendSchema(_StrictBase):
    base_url: str
    locale: str
    marker_tags: list[str] = Field(description="Prepended to every record's quick tags")
    request_timeout: float = Field(gt=0)
    endpoints: EndpointsSchema
    retry: RetrySchema


# --- analytics.yaml ----------------------------------------------------------


class AnalyticsSchema(_StrictBase):
    enabled: bool
    tracker_url: str
    site_id: str

    @field_validator("tracker_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("tracker_url must be an http(s) URL")
        return value


# --- logging.yaml ------------------------------------------------------------


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema
