"""Core components package.

This package contains the core components of the A2A travel system.
"""

from .message_bus import (
    InMemoryMessageBus,
    MessageBus,
    MessageBusError,
    MessageHandler,
    SubscriptionError,
)
from .orchestrator import Orchestrator
from .registry import (
    AgentNotFoundError,
    AgentProtocol,
    AgentRegistry,
)
from .task_store import TaskStore
from .workflow import (
    TravelPlan,
    TravelPlanWorkflow,
    build_default_orchestrator,
)

__all__ = [
    # Registry
    "AgentRegistry",
    "AgentProtocol",
    "AgentNotFoundError",
    # Message Bus
    "MessageBus",
    "MessageHandler",
    "InMemoryMessageBus",
    "MessageBusError",
    "SubscriptionError",
    # Task Store
    "TaskStore",
    # Orchestrator
    "Orchestrator",
    # Workflow
    "TravelPlan",
    "TravelPlanWorkflow",
    "build_default_orchestrator",
]
