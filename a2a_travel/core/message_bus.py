"""Message Bus - Delivery channel between the orchestrator and agents.

This module provides the transport abstraction used by the orchestrator
to deliver messages to agents. Handler logic only ever sees the
``AgentMessage`` envelope, so the in-process bus can be swapped for a
queued or brokered one.
"""

from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable

from a2a_travel.models import AgentMessage
from a2a_travel.utils.exceptions import A2ATravelError
from a2a_travel.utils.logging import get_logger

# Type alias for message handlers
MessageHandler = Callable[[AgentMessage], None]

logger = get_logger(__name__)


class MessageBusError(A2ATravelError):
    """Base exception for message bus errors."""

    pass


class SubscriptionError(MessageBusError):
    """Raised when subscription operations fail."""

    pass


class MessageBus(ABC):
    """Abstract base class for message bus implementations."""

    @abstractmethod
    def publish(self, message: AgentMessage) -> bool:
        """Deliver a message to its recipient.

        Args:
            message: The message to deliver.

        Returns:
            True if a subscriber received the message, False otherwise.
        """
        pass

    @abstractmethod
    def subscribe(self, agent_id: str, handler: MessageHandler) -> None:
        """Subscribe an agent to receive messages.

        Args:
            agent_id: The ID of the subscribing agent.
            handler: Callback invoked with each message for the agent.
        """
        pass

    @abstractmethod
    def unsubscribe(self, agent_id: str) -> None:
        """Unsubscribe an agent from the bus."""
        pass

    @abstractmethod
    def is_subscribed(self, agent_id: str) -> bool:
        """Check if an agent is subscribed."""
        pass


class InMemoryMessageBus(MessageBus):
    """In-process message bus.

    Delivery is a direct, synchronous call of the recipient's handler.
    Messages are not retained unless ``max_history`` is positive, in which
    case the most recent deliveries are kept for debugging.
    """

    def __init__(self, max_history: int = 0):
        """Initialize the message bus.

        Args:
            max_history: Maximum number of delivered messages to keep.
        """
        self._subscribers: dict[str, MessageHandler] = {}
        self._max_history = max_history
        self._history: deque[AgentMessage] = deque(maxlen=max(max_history, 0))

    def publish(self, message: AgentMessage) -> bool:
        """Deliver a message to its recipient's handler.

        Handler exceptions are logged and not propagated to the sender.
        """
        handler = self._subscribers.get(message.to_agent_id)
        if handler is None:
            logger.warning(
                "No subscriber for message",
                message_id=message.id,
                message_type=message.type.value,
                to_agent_id=message.to_agent_id,
                task_id=message.task_id,
            )
            return False

        if self._max_history > 0:
            self._history.append(message)

        try:
            handler(message)
        except Exception as e:
            logger.error(
                "Error delivering message",
                message_id=message.id,
                to_agent_id=message.to_agent_id,
                error=str(e),
                exc_info=True,
            )
        return True

    def subscribe(self, agent_id: str, handler: MessageHandler) -> None:
        """Subscribe an agent to receive messages.

        Raises:
            SubscriptionError: If the agent is already subscribed.
        """
        if agent_id in self._subscribers:
            raise SubscriptionError(f"Agent {agent_id} is already subscribed")
        self._subscribers[agent_id] = handler

    def unsubscribe(self, agent_id: str) -> None:
        self._subscribers.pop(agent_id, None)

    def is_subscribed(self, agent_id: str) -> bool:
        return agent_id in self._subscribers

    def get_history(
        self, task_id: str | None = None, limit: int = 100
    ) -> list[AgentMessage]:
        """Get delivered messages, newest first.

        Args:
            task_id: Optional filter by task ID.
            limit: Maximum number of messages to return.
        """
        messages = [
            m for m in self._history if task_id is None or m.task_id == task_id
        ]
        return list(reversed(messages[-limit:]))
