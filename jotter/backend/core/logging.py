"""
Centralized Logging.

structlog on top of the stdlib logging tree, configured from
config/settings/logging.yaml. Every module gets its logger from
get_logger(__name__); nothing configures handlers on its own.

Each record carries timestamp, level, logger, event, func_name and lineno.
Inside an HTTP request the middleware also binds request_id, source, method
and path. Outside one (CLI commands), pass the source explicitly with
log_with_source().

    logger = get_logger(__name__)
    logger.info("Entry shared", extra={"entry_id": entry.id})

The optional file handler always writes JSON lines, whatever the console
format is, so logs/system.jsonl can be filtered by field.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from jotter.backend.core.config import find_project_root, load_yaml_config
from jotter.backend.core.config_schema import LoggingSchema

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "api",
    "internal",
    "agent",
    "unknown",
})

# Chatty third-party loggers held at WARNING regardless of the root level
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "anthropic")

_logging_config: LoggingSchema | None = None


def _get_logging_config() -> LoggingSchema:
    """logging.yaml, validated and cached for the life of the process."""
    global _logging_config
    if _logging_config is None:
        _logging_config = LoggingSchema(**load_yaml_config("logging.yaml"))
    return _logging_config


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _build_handlers(
    config: LoggingSchema,
    format_type: str,
    console_enabled: bool,
    file_enabled: bool,
    processors: list[Processor],
) -> list[logging.Handler]:
    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors,
    )
    handlers: list[logging.Handler] = []

    if console_enabled:
        if format_type == "console":
            formatter = structlog.stdlib.ProcessorFormatter(
                processor=structlog.dev.ConsoleRenderer(colors=True),
                foreign_pre_chain=processors,
            )
        else:
            formatter = json_formatter
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if file_enabled:
        file_config = config.handlers.file
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        handlers.append(file_handler)

    return handlers


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments left as None take their value from logging.yaml. Calling this
    again replaces the previous handlers.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console' for the console handler
        enable_console: Write to stdout
        enable_file_logging: Write JSON lines to the configured file
    """
    config = _get_logging_config()

    effective_level = (level or config.level).upper()
    effective_format = format_type or config.format
    console_enabled = (
        enable_console if enable_console is not None else config.handlers.console.enabled
    )
    file_enabled = (
        enable_file_logging if enable_file_logging is not None else config.handlers.file.enabled
    )

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, effective_level))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in _build_handlers(
        config, effective_format, console_enabled, file_enabled, processors
    ):
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit source, for code running outside a request.

    Raises:
        ValueError: source is not one of VALID_SOURCES
        AttributeError: level is not a logger method

    Example:
        log_with_source(logger, "cli", "info", "User created", user_id="abc")
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source!r}")
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
