"""Message Bus unit tests."""

import pytest

from a2a_travel.core.message_bus import InMemoryMessageBus, SubscriptionError
from a2a_travel.models import AgentMessage, MessageType


def create_message(
    to_agent_id: str = "agent_002",
    task_id: str | None = None,
) -> AgentMessage:
    """Helper to create test messages."""
    return AgentMessage(
        from_agent_id="agent_001",
        to_agent_id=to_agent_id,
        type=MessageType.INFORMATION_REQUEST,
        content={"query": {"type": "test"}},
        task_id=task_id,
    )


class TestInMemoryMessageBus:
    """Test InMemoryMessageBus class."""

    @pytest.fixture
    def bus(self):
        """Create a fresh message bus."""
        return InMemoryMessageBus()

    def test_subscribe(self, bus):
        """Test subscribing to the bus."""
        bus.subscribe("agent_001", lambda m: None)

        assert bus.is_subscribed("agent_001")
        assert not bus.is_subscribed("agent_002")

    def test_subscribe_duplicate(self, bus):
        """Test subscribing the same agent twice raises error."""
        bus.subscribe("agent_001", lambda m: None)

        with pytest.raises(SubscriptionError):
            bus.subscribe("agent_001", lambda m: None)

    def test_unsubscribe(self, bus):
        """Test unsubscribing from the bus."""
        bus.subscribe("agent_001", lambda m: None)
        bus.unsubscribe("agent_001")

        assert not bus.is_subscribed("agent_001")
        bus.unsubscribe("agent_001")

    def test_publish_delivers_to_recipient(self, bus):
        """Test a published message reaches its recipient only."""
        received: list[AgentMessage] = []
        others: list[AgentMessage] = []
        bus.subscribe("agent_002", received.append)
        bus.subscribe("agent_003", others.append)

        message = create_message()
        assert bus.publish(message) is True

        assert received == [message]
        assert others == []

    def test_publish_unknown_recipient(self, bus):
        """Test publishing to an unknown recipient returns False."""
        assert bus.publish(create_message("nobody")) is False

    def test_handler_errors_are_contained(self, bus):
        """Test a failing handler does not raise into the sender."""

        def failing_handler(message):
            raise RuntimeError("boom")

        bus.subscribe("agent_002", failing_handler)

        assert bus.publish(create_message()) is True

    def test_history_disabled_by_default(self, bus):
        """Test messages are not retained by default."""
        bus.subscribe("agent_002", lambda m: None)
        bus.publish(create_message())

        assert bus.get_history() == []

    def test_history(self):
        """Test bounded message history, newest first."""
        bus = InMemoryMessageBus(max_history=2)
        bus.subscribe("agent_002", lambda m: None)
        messages = [create_message(task_id=f"task_{i}") for i in range(3)]
        for message in messages:
            bus.publish(message)

        assert bus.get_history() == [messages[2], messages[1]]
        assert bus.get_history(task_id="task_1") == [messages[1]]
        assert bus.get_history(limit=1) == [messages[2]]
