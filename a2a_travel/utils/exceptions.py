"""Custom exception classes for the A2A travel orchestration core.

This module provides a unified exception hierarchy for the package.
Component-specific exceptions (registry, message bus, services) inherit
from these classes and are defined next to the code that raises them.
"""

from typing import Any


class A2ATravelError(Exception):
    """Base exception for all A2A travel errors.

    All custom exceptions in this package should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            cause: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(A2ATravelError):
    """Raised when there's a configuration error."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        self.config_key = config_key
        self.value = value
        msg = message or f"Invalid configuration value for {config_key}: {value}"
        super().__init__(
            msg, details={"config_key": config_key, "value": str(value)}, cause=cause
        )


# ============================================================================
# External Service Errors
# ============================================================================


class ExternalServiceError(A2ATravelError):
    """Base class for failures of external data sources."""

    def __init__(
        self,
        message: str,
        service: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        details: dict[str, Any] = {"service": service}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details, cause=cause)
        self.service = service
        self.status_code = status_code


# ============================================================================
# Task Errors
# ============================================================================


class TaskNotFoundError(A2ATravelError):
    """Raised when a task is not present in the task table."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}", details={"task_id": task_id})
        self.task_id = task_id


class WorkflowInputError(A2ATravelError):
    """Raised when a workflow is started with invalid input."""

    def __init__(self, field: str, message: str):
        super().__init__(message, details={"field": field})
        self.field = field


# ============================================================================
# Timeout Errors
# ============================================================================


class TimeoutExceededError(A2ATravelError):
    """Base class for timeout errors."""

    def __init__(
        self,
        message: str,
        timeout_seconds: float,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details=details)
        self.timeout_seconds = timeout_seconds


class TaskWaitTimeoutError(TimeoutExceededError):
    """Raised when a task does not reach a terminal status in time."""

    def __init__(self, task_id: str, timeout_seconds: float):
        super().__init__(
            f"Task {task_id} did not finish within {timeout_seconds}s",
            timeout_seconds=timeout_seconds,
            details={"task_id": task_id},
        )
        self.task_id = task_id


class InformationRequestTimeout(TimeoutExceededError):
    """Raised when an information request receives no response in time."""

    def __init__(self, agent_id: str, query_type: str | None, timeout_seconds: float):
        super().__init__(
            f"No response from agent {agent_id} to '{query_type}' "
            f"within {timeout_seconds}s",
            timeout_seconds=timeout_seconds,
            details={"agent_id": agent_id, "query_type": query_type},
        )
        self.agent_id = agent_id
        self.query_type = query_type
