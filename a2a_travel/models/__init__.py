"""Data models package.

This module defines all data models used in the A2A travel orchestration core.
"""

from .agent import (
    AgentCapability,
    AgentInfo,
    AgentStatus,
    AgentType,
    CapabilityParameter,
)
from .message import (
    ORCHESTRATOR_ID,
    AgentMessage,
    MessageType,
)
from .task import (
    FollowUpTask,
    Task,
    TaskPriority,
    TaskResult,
    TaskStatus,
)

__all__ = [
    # Agent models
    "AgentCapability",
    "AgentInfo",
    "AgentStatus",
    "AgentType",
    "CapabilityParameter",
    # Message models
    "ORCHESTRATOR_ID",
    "AgentMessage",
    "MessageType",
    # Task models
    "FollowUpTask",
    "Task",
    "TaskPriority",
    "TaskResult",
    "TaskStatus",
]
