"""
Configuration Management.

Two sources, both resolved from the directory holding the .project_root
marker:

    config/settings/*.yaml   application, logging and concurrency settings,
                             validated by core.config_schema
    environment / config/.env
        PORT        HTTP port; wins over application.yaml (8080)
        LOG_LEVEL   wins over logging.yaml

Both are loaded once and cached; tests call ``cache_clear()`` on the getters.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from calendar_server.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    LoggingSchema,
)

PROJECT_MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory to the .project_root marker."""
    current = Path.cwd()
    while current != current.parent:
        if (current / PROJECT_MARKER).exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read one file from config/settings/. An empty file yields {}."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Per-process overrides from the environment."""

    port: int | None = None
    log_level: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type[BaseModel], filename: str) -> Any:
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """
    Validated YAML settings.

    Every file is read and checked in the constructor, so a broken file
    stops the process at startup.
    """

    FILES: dict[str, tuple[type[BaseModel], str]] = {
        "application": (ApplicationSchema, "application.yaml"),
        "logging": (LoggingSchema, "logging.yaml"),
        "concurrency": (ConcurrencySchema, "concurrency.yaml"),
    }

    def __init__(self) -> None:
        self._sections = {
            name: _load_validated(schema_cls, filename)
            for name, (schema_cls, filename) in self.FILES.items()
        }

    @property
    def application(self) -> ApplicationSchema:
        """Identity, server address, CORS."""
        return self._sections["application"]

    @property
    def logging(self) -> LoggingSchema:
        """Level, format, handlers."""
        return self._sections["logging"]

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Thread pool size, shutdown drain window."""
        return self._sections["concurrency"]


@lru_cache
def get_settings() -> Settings:
    """Environment overrides, with config/.env as a fallback source."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Validated YAML settings."""
    return AppConfig()


def get_server_address() -> tuple[str, int]:
    """(host, port) to bind; PORT wins over application.yaml."""
    server = get_app_config().application.server
    port = get_settings().port
    return server.host, server.port if port is None else port


def get_log_level() -> str:
    """LOG_LEVEL when set, else the level in logging.yaml."""
    return get_settings().log_level or get_app_config().logging.level
