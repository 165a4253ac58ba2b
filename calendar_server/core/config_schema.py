"""
Configuration Schemas.

One strict pydantic model per YAML file in config/settings/. Unknown keys,
missing keys and out-of-range values fail at startup with the offending
file named, instead of surfacing later as an AttributeError or a bad bind.

    ApplicationSchema  -> application.yaml
    LoggingSchema      -> logging.yaml
    ConcurrencySchema  -> concurrency.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class _StrictBase(BaseModel):
    """Rejects keys the schema does not declare."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    # Empty disables the CORS middleware
    origins: list[str]


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    server: ServerSchema
    cors: CorsSchema


# =============================================================================
# logging.yaml
# =============================================================================


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
    level: LogLevel
    format: Literal["json", "console"]
    handlers: HandlersSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    # Upper bound on store calls running at once
    max_workers: int = Field(ge=1)


class ShutdownSchema(_StrictBase):
    # Seconds in-flight requests get after SIGINT / SIGTERM
    drain_seconds: int = Field(ge=0)


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
    shutdown: ShutdownSchema
