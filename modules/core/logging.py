"""
Centralized Logging.

structlog on top of the standard logging module. Configuration comes from
config/settings/logging.yaml; explicit setup_logging() arguments override it.

Records are routed to per-source JSON-lines files under data/logs/:
    data/logs/cli.jsonl     - menu loop and operator actions
    data/logs/api.jsonl     - HTTP traffic to the inventory service
    data/logs/config.jsonl  - configuration loading
    data/logs/unknown.jsonl - anything that cannot be attributed

Usage:
    from modules.core.logging import get_logger, log_with_source

    logger = get_logger(__name__)
    logger.info("Product listed", count=3)
    log_with_source(logger, "api", "debug", "API request", path="/login")
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

from modules.core.config import SETTINGS_DIR, find_project_root, load_yaml

LOG_SOURCES = {"cli", "api", "config", "internal", "unknown"}

# Logger name prefix -> source, first match wins
_NAME_SOURCES = (
    ("httpx", "api"),
    ("httpcore", "api"),
    ("modules.cli.client", "api"),
    ("modules.core.config", "config"),
    ("modules.core", "internal"),
    ("modules.cli", "cli"),
)

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Load logging.yaml from the project settings directory."""
    global _logging_config
    path = find_project_root() / SETTINGS_DIR / "logging.yaml"
    _logging_config = load_yaml(path)
    return _logging_config


def _get_logging_config() -> dict[str, Any]:
    """Get the cached logging configuration, loading it on first use."""
    if _logging_config is None:
        return _load_logging_config()
    return _logging_config


def _get_logs_dir() -> Path:
    """Get data/logs under the project root, creating it if needed."""
    logs_dir = find_project_root() / "data" / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


class SourceRoutingHandler(logging.Handler):
    """
    Route log records to a rotating file per source.

    Source resolution order:
    1. Explicit ``source`` field (record attribute or structlog event key)
    2. ``frontend`` field
    3. Logger name prefix
    4. ``unknown``
    """

    def __init__(self, formatter: logging.Formatter):
        super().__init__()
        self.setFormatter(formatter)

        file_config = _get_logging_config().get("handlers", {}).get("file", {})
        self._max_bytes = file_config.get("max_bytes", 10485760)
        self._backup_count = file_config.get("backup_count", 5)
        self._logs_dir = _get_logs_dir()
        self._handlers: dict[str, RotatingFileHandler] = {}

    def _field(self, record: logging.LogRecord, name: str) -> Any:
        value = getattr(record, name, None)
        if value is None and isinstance(record.msg, dict):
            value = record.msg.get(name)
        return value

    def _determine_source(self, record: logging.LogRecord) -> str:
        for field in ("source", "frontend"):
            value = self._field(record, field)
            if value in LOG_SOURCES:
                return value

        for prefix, source in _NAME_SOURCES:
            if record.name == prefix or record.name.startswith(prefix + "."):
                return source

        return "unknown"

    def _get_handler(self, source: str) -> RotatingFileHandler:
        handler = self._handlers.get(source)
        if handler is None:
            handler = RotatingFileHandler(
                self._logs_dir / f"{source}.jsonl",
                maxBytes=self._max_bytes,
                backupCount=self._backup_count,
                encoding="utf-8",
            )
            handler.setFormatter(self.formatter)
            self._handlers[source] = handler
        return handler

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._get_handler(self._determine_source(record)).emit(record)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        for handler in self._handlers.values():
            handler.close()
        self._handlers.clear()
        super().close()


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Args:
        level: Log level name. Defaults to logging.yaml ``level``.
        format_type: ``console`` or ``json``. Defaults to logging.yaml ``format``.
        enable_file_logging: Route records to data/logs/. Defaults to
            logging.yaml ``handlers.file.enabled``.
    """
    config = _get_logging_config()
    handlers_config = config.get("handlers", {})

    level = (level or config.get("level", "WARNING")).upper()
    format_type = format_type or config.get("format", "console")
    if enable_file_logging is None:
        enable_file_logging = handlers_config.get("file", {}).get("enabled", False)

    structlog.configure(
        processors=_shared_processors() + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if isinstance(handler, SourceRoutingHandler):
            handler.close()

    if handlers_config.get("console", {}).get("enabled", True):
        if format_type == "json":
            console_renderer: Any = structlog.processors.JSONRenderer()
        else:
            console_renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(_formatter(console_renderer))
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        root_logger.addHandler(SourceRoutingHandler(_formatter(structlog.processors.JSONRenderer())))

    root_logger.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(logging.WARNING, root_logger.level))
    logging.getLogger("httpcore").setLevel(max(logging.WARNING, root_logger.level))


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to the given module name."""
    return structlog.get_logger(name)


def log_with_source(
    logger: Any,
    source: str,
    level: str,
    message: str,
    **kwargs: Any,
) -> None:
    """
    Log a message tagged with an explicit source for file routing.

    Args:
        logger: structlog logger
        source: One of LOG_SOURCES
        level: debug, info, warning, error or critical
        message: Event message
        **kwargs: Additional structured fields
    """
    getattr(logger, level)(message, source=source, **kwargs)
