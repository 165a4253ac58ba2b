"""
Structured Logging.

structlog renders every record, including records from stdlib loggers
such as uvicorn's, through one processor chain. Settings come from the
validated logging section of the app config (config/settings/logging.yaml);
arguments to setup_logging() override them.

Fields carried by each record:
    timestamp, level, logger, event   always
    func_name, lineno                 call site
    request_id, method, path          inside an HTTP request (middleware)
    extra                             structured fields passed by the caller

Usage:
    from calendar_server.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Event created", extra={"event_id": event.id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from calendar_server.core.config import find_project_root, get_app_config
from calendar_server.core.config_schema import FileHandlerSchema, LoggingSchema

# uvicorn's own request lines duplicate the middleware's access log
QUIETED_LOGGERS = ("uvicorn.access",)


def _load_logging_config() -> LoggingSchema:
    """Logging section of the cached app config."""
    return get_app_config().logging


def _resolve_log_path(configured_path: str) -> Path:
    """Resolve a log file path against the project root."""
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; existing root handlers are replaced.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console' for the console handler
        enable_console: Write records to stdout
        enable_file_logging: Also write JSON lines to the rotating log file
    """
    config = _load_logging_config()
    handlers = config.handlers

    level = level if level is not None else config.level
    format_type = format_type if format_type is not None else config.format
    if enable_console is None:
        enable_console = handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = handlers.file.enabled

    pre_chain = _shared_processors()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), pre_chain)
    if format_type == "console":
        console_formatter = _formatter(structlog.dev.ConsoleRenderer(colors=True), pre_chain)
    else:
        console_formatter = json_formatter

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if enable_console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(console_formatter)
        root.addHandler(stream)

    if enable_file_logging:
        root.addHandler(_file_handler(handlers.file, json_formatter))

    for name in QUIETED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a structlog logger.

    Args:
        name: Logger name, normally __name__
    """
    return structlog.get_logger(name)
