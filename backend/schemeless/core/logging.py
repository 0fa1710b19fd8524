"""Structured logging configuration for schemeless.

This module configures structlog for consistent, machine-readable logging
across the validator, the XML event stream and the CLI.
"""

import logging
import sys
import time
from typing import Any

import structlog
from structlog.typing import EventDict


def add_app_context(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application-specific context to log events."""
    event_dict["service"] = "schemeless"
    event_dict["component"] = event_dict.get("logger", "unknown")
    return event_dict


def configure_logging(
    environment: str = "development", log_level: str = "INFO", json_logs: bool = False
) -> None:
    """Configure structured logging for the application.

    Args:
        environment: Application environment (development/testing/production)
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR)
        json_logs: Whether to output JSON format logs
    """
    # Logs go to stderr so that --format json/yaml output stays parseable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    if json_logs or environment == "production":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables for the current validation run.

    Args:
        **kwargs: Context variables to bind (e.g., file, run_id)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class ValidationRunLogger:
    """Helper for logging the duration and outcome of one validation run."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, source: str):
        self.logger = logger
        self.source = source
        self.start_time: float | None = None
        self.duration_ms: float = 0.0

    def __enter__(self) -> "ValidationRunLogger":
        self.start_time = time.perf_counter()
        self.logger.debug("Validation started", source=self.source)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return

        self.duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)

        if exc_type is None:
            self.logger.debug(
                "Validation finished",
                source=self.source,
                duration_ms=self.duration_ms,
            )
        else:
            self.logger.error(
                "Validation aborted",
                source=self.source,
                duration_ms=self.duration_ms,
                error=str(exc_val),
                error_type=exc_type.__name__,
            )

    def log_verdict(self, is_valid: bool, **kwargs: Any) -> None:
        """Log the verdict of the run with context."""
        if is_valid:
            self.logger.info("Schema is valid", source=self.source, **kwargs)
        else:
            self.logger.info("Schema is invalid", source=self.source, **kwargs)
