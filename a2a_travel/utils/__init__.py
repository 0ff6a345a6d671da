"""Utility modules for the A2A travel core.

This package provides utility functions and classes for:
- Configuration management
- Structured logging
- Exception handling
"""

from .config import (
    AgentSettings,
    AppConfig,
    LogFormat,
    LoggingConfig,
    ProviderConfig,
    WorkflowConfig,
    get_config,
    init_config,
    reset_config,
)
from .exceptions import (
    A2ATravelError,
    ConfigurationError,
    ExternalServiceError,
    InformationRequestTimeout,
    InvalidConfigurationError,
    TaskNotFoundError,
    TaskWaitTimeoutError,
    TimeoutExceededError,
    WorkflowInputError,
)
from .logging import (
    LoggerAdapter,
    clear_task_context,
    get_agent_logger,
    get_logger,
    get_orchestrator_logger,
    get_task_context,
    set_task_context,
    setup_logging,
)

__all__ = [
    # Config
    "AppConfig",
    "LoggingConfig",
    "ProviderConfig",
    "AgentSettings",
    "WorkflowConfig",
    "LogFormat",
    "get_config",
    "init_config",
    "reset_config",
    # Logging
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
    "get_agent_logger",
    "get_orchestrator_logger",
    "get_task_context",
    "set_task_context",
    "clear_task_context",
    # Exceptions
    "A2ATravelError",
    "ConfigurationError",
    "InvalidConfigurationError",
    "ExternalServiceError",
    "TaskNotFoundError",
    "WorkflowInputError",
    "TimeoutExceededError",
    "TaskWaitTimeoutError",
    "InformationRequestTimeout",
]
