"""Agent Registry - Agent registration and discovery.

This module manages registered agents and provides type-based agent lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from a2a_travel.models import AgentInfo, AgentMessage, AgentType
from a2a_travel.utils.exceptions import A2ATravelError

if TYPE_CHECKING:
    from a2a_travel.agents.base import BaseAgent
    from a2a_travel.core.orchestrator import Orchestrator


@runtime_checkable
class AgentProtocol(Protocol):
    """Protocol defining the required interface for agents."""

    @property
    def id(self) -> str:
        """Agent identifier."""
        ...

    @property
    def type(self) -> AgentType:
        """Agent type."""
        ...

    def get_info(self) -> AgentInfo:
        """Read-only snapshot of the agent."""
        ...

    def set_orchestrator(self, orchestrator: Orchestrator) -> None:
        """Attach the orchestrator back-reference."""
        ...

    def receive_message(self, message: AgentMessage) -> None:
        """Entry point for inbound messages."""
        ...


class AgentNotFoundError(A2ATravelError):
    """Raised when an agent is not found in the registry."""

    def __init__(self, agent_id: str):
        super().__init__(f"Agent not found: {agent_id}", details={"agent_id": agent_id})
        self.agent_id = agent_id


class AgentRegistry:
    """Registry for managing agents.

    Keeps agents by id plus a secondary index by ``AgentType`` in
    registration order. All access happens on a single event loop, so
    no locking is needed.
    """

    def __init__(self) -> None:
        self._agents: dict[str, BaseAgent] = {}
        self._by_type: dict[AgentType, list[BaseAgent]] = {}

    def register(self, agent: BaseAgent) -> AgentInfo:
        """Register an agent.

        Registering the same instance twice is a no-op.

        Args:
            agent: The agent to register.

        Returns:
            AgentInfo snapshot of the registered agent.
        """
        if self._agents.get(agent.id) is not agent:
            self._agents[agent.id] = agent
            self._by_type.setdefault(agent.type, []).append(agent)
        return agent.get_info()

    def unregister(self, agent_id: str) -> bool:
        """Unregister an agent.

        Args:
            agent_id: The ID of the agent to unregister.

        Returns:
            True if the agent was unregistered, False if not found.
        """
        agent = self._agents.pop(agent_id, None)
        if agent is None:
            return False
        agents = self._by_type.get(agent.type, [])
        if agent in agents:
            agents.remove(agent)
        if not agents:
            self._by_type.pop(agent.type, None)
        return True

    def get(self, agent_id: str) -> BaseAgent:
        """Get an agent by ID.

        Raises:
            AgentNotFoundError: If the agent is not found.
        """
        if agent_id not in self._agents:
            raise AgentNotFoundError(agent_id)
        return self._agents[agent_id]

    def find(self, agent_id: str) -> BaseAgent | None:
        """Get an agent by ID, or None if it is not registered."""
        return self._agents.get(agent_id)

    def agents(self) -> list[BaseAgent]:
        """All registered agents, in registration order."""
        return list(self._agents.values())

    def agents_of_type(self, agent_type: AgentType) -> list[BaseAgent]:
        """Registered agents of a type, in registration order."""
        return list(self._by_type.get(agent_type, []))

    def list_all(self) -> list[AgentInfo]:
        """Snapshots of all registered agents."""
        return [agent.get_info() for agent in self._agents.values()]

    def list_by_type(self, agent_type: AgentType) -> list[AgentInfo]:
        """Snapshots of the registered agents of a type."""
        return [agent.get_info() for agent in self._by_type.get(agent_type, [])]

    def __len__(self) -> int:
        """Return the number of registered agents."""
        return len(self._agents)

    def __contains__(self, agent_id: str) -> bool:
        """Check if an agent is registered."""
        return agent_id in self._agents
