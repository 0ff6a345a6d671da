"""Agent module - Base classes and implementations for agents.

This module provides the foundation for creating agents including:
- BaseAgent: Abstract base class for all agents
- ActionAgent: Template dispatching tasks and queries to registered handlers
- Travel agent implementations (Safety, Flight Booking, Accommodation)
"""

from a2a_travel.agents.base import (
    ActionAgent,
    ActionHandler,
    AgentError,
    BaseAgent,
    MessageDeliveryError,
    QueryHandler,
)
from a2a_travel.agents.implementations import (
    AccommodationAgent,
    FlightBookingAgent,
    TravelSafetyAgent,
)

__all__ = [
    # Base
    "ActionAgent",
    "ActionHandler",
    "AgentError",
    "BaseAgent",
    "MessageDeliveryError",
    "QueryHandler",
    # Implementations
    "AccommodationAgent",
    "FlightBookingAgent",
    "TravelSafetyAgent",
]
