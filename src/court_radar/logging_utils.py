# logging_utils.py
"""Structured logging utilities for the Court Radar service."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredFormatter(logging.Formatter):
    """Formatter that renders log records as single-line JSON documents."""

    # Standard LogRecord attributes never copied into "extra"
    STANDARD_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    }

    def __init__(
        self,
        service_name: str = "court-radar",
        include_timestamp: bool = True,
        include_extra: bool = True,
    ):
        """Initialize the structured formatter.

        Args:
            service_name: Name of the service to include in logs
            include_timestamp: Whether to include timestamp in output
            include_extra: Whether to include extra fields from log record
        """
        super().__init__()
        self.service_name = service_name
        self.include_timestamp = include_timestamp
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "service": self.service_name,
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = {}
            for key, value in record.__dict__.items():
                if key in self.STANDARD_ATTRS or key.startswith("_"):
                    continue
                try:
                    json.dumps(value)
                    extra_fields[key] = value
                except (TypeError, ValueError):
                    extra_fields[key] = str(value)

            if extra_fields:
                log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development environments."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level_str = f"{color}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"

        formatted = f"[{timestamp}] {level_str} [{record.name}] {record.getMessage()}"

        scan_id = getattr(record, "scan_id", None)
        if scan_id:
            formatted += f" (scan={scan_id})"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(
    level: Optional[str] = None,
    structured: Optional[bool] = None,
    service_name: str = "court-radar",
) -> logging.Logger:
    """Set up logging configuration for Court Radar.

    Configures the root logger and returns the ``court_radar`` package
    logger. Production runs get one JSON document per line, development
    runs get colourised human-readable output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to LOG_LEVEL env var or INFO.
        structured: Whether to use structured JSON logging.
                   Defaults to True outside development (APP_ENV != 'dev').
        service_name: Service name to include in structured logs.

    Returns:
        Logger instance for court_radar

    Example:
        >>> logger = setup_logging(level="DEBUG", structured=False)
        >>> logger.info("Scan started", extra={"scan_id": "abc"})
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    level = level.upper()
    log_level = getattr(logging, level, logging.INFO)

    if structured is None:
        structured = os.environ.get("APP_ENV", "dev") != "dev"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if structured:
        formatter = StructuredFormatter(service_name=service_name)
    else:
        formatter = HumanReadableFormatter(use_colors=True)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    _configure_third_party_loggers(log_level)

    logger = logging.getLogger("court_radar")
    logger.info(
        "Logging initialized",
        extra={
            "log_level": level,
            "structured": structured,
            "service": service_name,
        }
    )

    return logger


def _configure_third_party_loggers(log_level: int) -> None:
    """Quiet down noisy third-party loggers unless running at DEBUG."""
    noisy_loggers = [
        "uvicorn.access",
        "sqlalchemy.engine",
        "httpx",
        "httpcore",
        "asyncio",
    ]

    third_party_level = logging.WARNING if log_level > logging.DEBUG else log_level

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the court_radar namespace.

    Args:
        name: The name of the logger (will be prefixed with 'court_radar.')

    Returns:
        A logger instance
    """
    if not name.startswith("court_radar"):
        name = f"court_radar.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for adding extra fields to log messages.

    Fields set here are merged into every record emitted through a
    ContextAdapter while the context is active.

    Example:
        >>> with LogContext(scan_id="12345"):
        ...     logger.info("Revealing prospect")  # includes scan_id
    """

    _context: Dict[str, Any] = {}

    def __init__(self, **kwargs: Any):
        self.new_context = kwargs
        self.old_context: Dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = LogContext._context.copy()
        LogContext._context.update(self.new_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        LogContext._context = self.old_context

    @classmethod
    def get_context(cls) -> Dict[str, Any]:
        """Get a copy of the current log context."""
        return cls._context.copy()


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that includes LogContext fields and adapter defaults.

    Example:
        >>> logger = ContextAdapter(get_logger("session"), {"scan_id": "abc"})
        >>> logger.info("Scan completed")  # includes scan_id
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(self.extra or {})
        extra.update(LogContext.get_context())
        extra.update(kwargs.get("extra", {}))
        kwargs["extra"] = extra
        return msg, kwargs
