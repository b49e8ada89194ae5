"""
MyJellyBean - Logging Infrastructure

This module provides structured logging with support for:
- JSON formatted logs for production
- Text formatted logs for development
- Context binding for request and analysis tracing
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, ParamSpec

import structlog
from structlog.types import Processor

from myjellybean.core.config import get_settings

# Context variables for request tracing
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
analysis_id_context: ContextVar[Optional[str]] = ContextVar("analysis_id", default=None)

P = ParamSpec("P")
R = TypeVar("R")


def add_context_variables(
    logger: logging.Logger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Add context variables to log entries.

    This processor adds request_id and analysis_id from
    context variables to every log entry.
    """
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id

    analysis_id = analysis_id_context.get()
    if analysis_id:
        event_dict["analysis_id"] = analysis_id

    return event_dict


def get_log_level(settings: Any) -> int:
    """Convert string log level to logging constant."""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(settings.log_level.upper(), logging.INFO)


def get_processors(settings: Any) -> list[Processor]:
    """Get structlog processors based on settings."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_variables,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    return processors


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    This should be called once at application startup.
    """
    settings = get_settings()

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=get_log_level(settings),
    )

    # Configure structlog
    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A structlog BoundLogger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("analysis_requested", message_length=42)
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for setting log context variables.

    Example:
        >>> with LogContext(analysis_id="a1b2c3"):
        ...     log.info("analysis_started")
    """

    def __init__(
        self,
        request_id: Optional[str] = None,
        analysis_id: Optional[str] = None,
    ):
        self.request_id = request_id
        self.analysis_id = analysis_id
        self._tokens: list = []

    def __enter__(self) -> "LogContext":
        if self.request_id:
            self._tokens.append((request_id_context, request_id_context.set(self.request_id)))
        if self.analysis_id:
            self._tokens.append((analysis_id_context, analysis_id_context.set(self.analysis_id)))
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


def log_execution_time(
    log: structlog.stdlib.BoundLogger,
    operation: str,
    **extra_fields: Any
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator to log execution time of a coroutine function.

    Failures are logged with their exception type so that distinct
    failure kinds can be told apart in the logs, then re-raised.

    Args:
        log: Logger instance
        operation: Name of the operation being timed
        **extra_fields: Additional fields to include in the log

    Example:
        >>> @log_execution_time(log, "provider_call")
        ... async def analyze(request: AnalysisRequest) -> AnalysisResult:
        ...     ...
    """
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                duration_ms = (time.perf_counter() - start_time) * 1000
                log.info(
                    f"{operation}_completed",
                    duration_ms=round(duration_ms, 2),
                    success=True,
                    **extra_fields
                )
                return result
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                log.error(
                    f"{operation}_failed",
                    duration_ms=round(duration_ms, 2),
                    success=False,
                    error=str(e),
                    error_type=type(e).__name__,
                    **extra_fields
                )
                raise
        return wrapper
    return decorator
