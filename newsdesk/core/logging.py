"""
Logging.

structlog on top of the stdlib logging tree, configured once per process
from config/settings/logging.yaml. Every record carries a ``source`` naming
the part of newsdesk that produced it:

    web        page renders and form posts
    api        JSON endpoints
    client     calls to the content backend
    forms      notifications shown to the user
    analytics  tracker mounting
    cli        command line
    internal   startup, shutdown and everything else

Records emitted without a source (third-party libraries, plain
``logger.info`` calls) are tagged ``unknown``. Inside a request the
middleware also binds request_id, frontend, method and path.

Usage:
    from newsdesk.core.logging import get_logger, log_with_source, setup_logging

    setup_logging()                                   # from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    log_with_source(logger, "client", "info", "Tag list fetched", count=12)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from newsdesk.core.config import find_project_root, get_app_config
from newsdesk.core.config_schema import FileHandlerSchema

VALID_SOURCES = frozenset({
    "web",
    "api",
    "client",
    "forms",
    "analytics",
    "cli",
    "internal",
    "unknown",
})

# Per-request lines from these duplicate what the middleware and client log
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def _tag_source(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Default ``source`` to "unknown" and flag values outside VALID_SOURCES."""
    source = event_dict.get("source")
    if source is None:
        event_dict["source"] = "unknown"
    elif source not in VALID_SOURCES:
        event_dict["source"] = "unknown"
        event_dict["declared_source"] = source
    return event_dict


def _processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _tag_source,
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


def _file_handler(settings: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    """Rotating JSONL file under the project root."""
    path = find_project_root() / settings.path
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
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
    Configure structlog and the root logger.

    Arguments left as None fall back to logging.yaml. Existing root
    handlers are replaced, so calling this twice is safe.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: "json" or "console" (console output only; the file is always JSONL)
        enable_console: Write to stdout
        enable_file_logging: Write to the rotating JSONL file
    """
    settings = get_app_config().logging
    level = level or settings.level
    format_type = format_type or settings.format
    if enable_console is None:
        enable_console = settings.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = settings.handlers.file.enabled

    pre_chain = _processors()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), pre_chain)
    handlers: list[logging.Handler] = []

    if enable_console:
        console = logging.StreamHandler(sys.stdout)
        if format_type == "console":
            console.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=True), pre_chain))
        else:
            console.setFormatter(json_formatter)
        handlers.append(console)

    if enable_file_logging:
        handlers.append(_file_handler(settings.handlers.file, json_formatter))

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(getattr(logging, level.upper()))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """structlog logger for ``name`` (normally the module's ``__name__``)."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log ``message`` tagged with ``source``.

    Raises:
        AttributeError: If ``level`` is not a logger method name

    Example:
        log_with_source(logger, "client", "info", "Record created", record_id=42)
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
