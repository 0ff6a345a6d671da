"""Structured logging configuration.

This module provides structured logging using structlog with JSON and console formatters.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import EventDict, Processor

# Context variable for the task being handled (tracking across agent coroutines)
task_id_var: ContextVar[str | None] = ContextVar("task_id", default=None)


def get_task_context() -> str | None:
    """Get the current task ID from context."""
    return task_id_var.get()


def set_task_context(task_id: str | None) -> None:
    """Set the task ID for log events emitted in the current context."""
    task_id_var.set(task_id)


def clear_task_context() -> None:
    """Clear the task ID from context."""
    task_id_var.set(None)


def add_task_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds the current task ID to log events."""
    task_id = get_task_context()
    if task_id:
        event_dict.setdefault("task_id", task_id)
    return event_dict


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds application context to log events."""
    event_dict.setdefault("app", "a2a-travel")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use console format
        log_file: Optional file path to write logs to
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_task_context,
        add_app_context,
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    handlers: list[logging.Handler] = [handler]
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True,
    )

    # Set levels for noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Optional logger name. If not provided, uses the caller's module name.

    Returns:
        A configured structlog BoundLogger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


class LoggerAdapter:
    """Adapter for logging with additional context.

    This class provides a convenient way to add persistent context to log messages.
    """

    def __init__(self, name: str | None = None, **initial_context: Any):
        """Initialize the logger adapter.

        Args:
            name: Logger name
            **initial_context: Initial context to bind to all log messages
        """
        self._logger = get_logger(name)
        self._context = initial_context

    @property
    def context(self) -> dict[str, Any]:
        """Context bound to every message."""
        return dict(self._context)

    def bind(self, **new_context: Any) -> "LoggerAdapter":
        """Create a new adapter with additional context."""
        merged = {**self._context, **new_context}
        adapter = LoggerAdapter.__new__(LoggerAdapter)
        adapter._logger = self._logger
        adapter._context = merged
        return adapter

    def _log(self, level: str, event: str, **kwargs: Any) -> None:
        merged = {**self._context, **kwargs}
        log_method = getattr(self._logger, level)
        log_method(event, **merged)

    def debug(self, event: str, **kwargs: Any) -> None:
        self._log("debug", event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._log("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._log("warning", event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._log("error", event, **kwargs)

    def exception(self, event: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._log("exception", event, **kwargs)


def get_agent_logger(
    agent_id: str,
    agent_name: str | None = None,
    agent_type: str | None = None,
) -> LoggerAdapter:
    """Get a logger configured for an agent.

    Args:
        agent_id: The agent's unique identifier
        agent_name: Optional agent name
        agent_type: Optional agent type value

    Returns:
        LoggerAdapter with agent context bound
    """
    context: dict[str, Any] = {"agent_id": agent_id}
    if agent_name:
        context["agent_name"] = agent_name
    if agent_type:
        context["agent_type"] = agent_type
    return LoggerAdapter("agent", **context)


def get_orchestrator_logger() -> LoggerAdapter:
    """Get a logger configured for orchestrator operations."""
    return LoggerAdapter("orchestrator")
