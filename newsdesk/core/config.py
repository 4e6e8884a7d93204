"""
Configuration.

Two sources, both resolved from the directory holding ``.project_root``:

config/.env (or the process environment), read with pydantic-settings:
    STRAPI_TOKEN     fixed middle fragment of the backend bearer token
    STRAPI_ENDPOINT  backend base URL, overriding backend.yaml
    BASE_PATH        page path prefix, overriding application.yaml

config/settings/*.yaml, validated against config_schema at first access:
    application.yaml, backend.yaml, analytics.yaml, logging.yaml

Both are cached for the life of the process; tests call
``get_settings.cache_clear()`` after changing the environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from newsdesk.core.config_schema import (
    AnalyticsSchema,
    ApplicationSchema,
    BackendSchema,
    LoggingSchema,
)

ROOT_MARKER = ".project_root"
SETTINGS_DIR = Path("config") / "settings"
ENV_FILE = Path("config") / ".env"


def find_project_root(start: Path | None = None) -> Path:
    """Nearest directory at or above ``start`` (default: cwd) holding ROOT_MARKER."""
    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / ROOT_MARKER).exists():
            return candidate
    raise RuntimeError(f"No {ROOT_MARKER} found at or above {here}")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """
    Raw contents of one settings file.

    Raises:
        FileNotFoundError: If config/settings/<filename> does not exist
    """
    path = find_project_root() / SETTINGS_DIR / filename
    if not path.is_file():
        raise FileNotFoundError(f"Settings file missing: {path}")
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


class Settings(BaseSettings):
    """Values that differ per deployment and never live in YAML."""

    strapi_token: str = "secret"
    strapi_endpoint: str | None = None
    base_path: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig:
    """Validated YAML settings, one attribute per file."""

    files: dict[str, type[BaseModel]] = {
        "application": ApplicationSchema,
        "backend": BackendSchema,
        "analytics": AnalyticsSchema,
        "logging": LoggingSchema,
    }

    def __init__(self) -> None:
        self._sections = {name: self._load(name, schema) for name, schema in self.files.items()}

    @staticmethod
    def _load(name: str, schema: type[BaseModel]) -> BaseModel:
        filename = f"{name}.yaml"
        try:
            return schema(**load_yaml_config(filename))
        except ValidationError as e:
            raise ValueError(f"{filename} does not match its schema:\n{e}") from e

    @property
    def application(self) -> ApplicationSchema:
        return self._sections["application"]

    @property
    def backend(self) -> BackendSchema:
        return self._sections["backend"]

    @property
    def analytics(self) -> AnalyticsSchema:
        return self._sections["analytics"]

    @property
    def logging(self) -> LoggingSchema:
        return self._sections["logging"]


@lru_cache
def get_settings() -> Settings:
    """Environment settings, with config/.env as fallback."""
    return Settings(_env_file=str(find_project_root() / ENV_FILE))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_backend_base_url() -> str:
    """Content backend base URL without a trailing slash; STRAPI_ENDPOINT wins."""
    base_url = get_settings().strapi_endpoint or get_app_config().backend.base_url
    return base_url.rstrip("/")


def get_base_path() -> str:
    """Path prefix the pages are served under ("" for the root); BASE_PATH wins."""
    override = get_settings().base_path
    if override is None:
        return get_app_config().application.base_path
    override = override.strip().strip("/")
    return f"/{override}" if override else ""
