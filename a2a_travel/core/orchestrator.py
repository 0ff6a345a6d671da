"""Orchestrator - Central coordinator for agent collaboration.

This module owns the agent registry, the task table and the message bus.
It creates tasks, assigns them to agents of the requested type, routes
messages and expands follow-up tasks.

Every method that touches the task table is synchronous. Agents run
their work as coroutines scheduled on the running event loop. A task
created outside a running loop is stored but stays pending.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

from a2a_travel.models import (
    ORCHESTRATOR_ID,
    AgentInfo,
    AgentMessage,
    AgentType,
    FollowUpTask,
    MessageType,
    Task,
    TaskPriority,
    TaskResult,
    TaskStatus,
)
from a2a_travel.utils.logging import get_orchestrator_logger

from .message_bus import InMemoryMessageBus, MessageBus
from .registry import AgentRegistry
from .task_store import TaskStore

if TYPE_CHECKING:
    from a2a_travel.agents.base import BaseAgent

FOLLOW_UP_TITLE = "Follow-up task"


class Orchestrator:
    """Central coordinator for agent collaboration.

    Each instance keeps its own registry and task table; nothing is shared
    between orchestrators.
    """

    ORCHESTRATOR_ID = ORCHESTRATOR_ID

    def __init__(
        self,
        registry: AgentRegistry | None = None,
        message_bus: MessageBus | None = None,
        task_store: TaskStore | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Agent registry for agent lookup.
            message_bus: Message bus for agent delivery.
            task_store: Task table.
            rng: Random source for agent selection.
            seed: Seed for a new random source when ``rng`` is not given.
        """
        self.registry = registry or AgentRegistry()
        self.message_bus = message_bus or InMemoryMessageBus()
        self.tasks = task_store or TaskStore()
        self._rng = rng or random.Random(seed)
        self._logger = get_orchestrator_logger()

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    def register_agent(self, agent: BaseAgent) -> AgentInfo:
        """Register an agent and attach this orchestrator to it.

        Registering the same instance twice is logged and otherwise ignored.

        Args:
            agent: The agent to register.

        Returns:
            AgentInfo snapshot of the agent (status ``active``).
        """
        if self.registry.find(agent.id) is agent:
            self._logger.warning("Agent already registered", agent_id=agent.id)
            return agent.get_info()

        self.registry.register(agent)
        self.message_bus.subscribe(agent.id, agent.receive_message)
        agent.set_orchestrator(self)

        info = agent.get_info()
        self._logger.info(
            "Agent registered",
            agent_id=agent.id,
            agent_name=agent.name,
            agent_type=agent.type.value,
            capabilities=info.get_actions(),
        )
        return info

    def unregister_agent(self, agent_id: str) -> bool:
        """Remove an agent from the registry and the bus.

        Returns:
            True if the agent was registered, False otherwise.
        """
        removed = self.registry.unregister(agent_id)
        if removed:
            self.message_bus.unsubscribe(agent_id)
            self._logger.info("Agent unregistered", agent_id=agent_id)
        return removed

    def get_agents(self) -> list[AgentInfo]:
        """Snapshots of all registered agents."""
        return self.registry.list_all()

    def get_agents_by_type(self, agent_type: AgentType) -> list[AgentInfo]:
        """Snapshots of the registered agents of a type."""
        return self.registry.list_by_type(agent_type)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(
        self,
        title: str,
        description: str,
        agent_type: AgentType,
        context: dict[str, Any] | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        parent_task_id: str | None = None,
    ) -> Task:
        """Create a task and try to assign it.

        Does not wait for execution.

        Args:
            title: Task title.
            description: Task description.
            agent_type: Type of agent the task must be routed to.
            context: Action name and action parameters.
            priority: Advisory priority.
            parent_task_id: Task that spawned this one, if any.

        Returns:
            Snapshot of the task, ``in_progress`` if an agent was available
            and an event loop is running, ``pending`` otherwise.
        """
        task = Task(
            title=title,
            description=description,
            agent_type=agent_type,
            context=dict(context or {}),
            priority=priority,
            parent_task_id=parent_task_id,
        )
        self.tasks.add(task)
        self._logger.info(
            "Task created",
            task_id=task.id,
            title=task.title,
            agent_type=task.agent_type.value,
            action=task.action,
            priority=task.priority.value,
            parent_task_id=parent_task_id,
        )

        self._assign_task(task)
        return task.model_copy(deep=True)

    def get_task(self, task_id: str) -> Task | None:
        """Snapshot of a task, or None if it does not exist."""
        task = self.tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    def get_all_tasks(self) -> list[Task]:
        """Snapshots of every task, in creation order."""
        return [task.model_copy(deep=True) for task in self.tasks.list_all()]

    def get_subtasks(self, task_id: str) -> list[Task]:
        """Snapshots of the follow-up tasks spawned by a task."""
        return [task.model_copy(deep=True) for task in self.tasks.children_of(task_id)]

    def update_task_status(
        self,
        task_id: str,
        status: TaskStatus | str,
        result: TaskResult | dict[str, Any] | None = None,
    ) -> bool:
        """Apply a status change reported for a task.

        Unknown tasks and illegal transitions (see
        ``TaskStatus.can_transition_to``) are logged and ignored. A completed
        result with ``next_tasks`` creates one follow-up task per entry.

        Args:
            task_id: The task to update.
            status: New status.
            result: Optional result; stored for ``completed`` and ``failed``.

        Returns:
            True if the update was applied.
        """
        task = self.tasks.get(task_id)
        if task is None:
            self._logger.error("Cannot update unknown task", task_id=task_id)
            return False

        status = TaskStatus(status)
        if isinstance(result, dict):
            result = TaskResult.model_validate(result)

        if not task.status.can_transition_to(status):
            self._logger.warning(
                "Ignoring illegal status transition",
                task_id=task_id,
                from_status=task.status.value,
                to_status=status.value,
            )
            return False

        previous = task.status
        if status == TaskStatus.COMPLETED:
            task.mark_completed(result)
        elif status == TaskStatus.FAILED:
            task.mark_failed(result)
        else:
            task.status = status
            task.touch()

        self._logger.info(
            "Task status updated",
            task_id=task_id,
            from_status=previous.value,
            to_status=status.value,
            success=result.success if result else None,
        )

        if status == TaskStatus.COMPLETED and result and result.next_tasks:
            self._create_follow_ups(task, result.next_tasks)
        if status.is_terminal:
            self.tasks.notify_terminal(task)
        return True

    async def wait_for_task(self, task_id: str, timeout: float | None = None) -> Task:
        """Wait for a task to reach a terminal status.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskWaitTimeoutError: If the task is not terminal in time.
        """
        return await self.tasks.wait_for(task_id, timeout)

    async def wait_for_tasks(
        self, task_ids: list[str], timeout: float | None = None
    ) -> list[Task]:
        """Wait for several tasks; results follow the order of ``task_ids``."""
        return list(
            await asyncio.gather(
                *(self.tasks.wait_for(task_id, timeout) for task_id in task_ids)
            )
        )

    async def drain(self) -> None:
        """Wait until no agent has handler coroutines in flight.

        Follow-up work started while draining is awaited as well.
        """
        while True:
            busy = [agent for agent in self.registry.agents() if agent.in_flight]
            if not busy:
                return
            await asyncio.gather(*(agent.drain() for agent in busy))

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def route_message(self, message: AgentMessage) -> bool:
        """Deliver a message to the orchestrator or to an agent.

        Never raises for unknown recipients; the task table is left as is.

        Returns:
            True if the message was delivered.
        """
        if message.is_for_orchestrator():
            return self._handle_message(message)

        if message.to_agent_id not in self.registry:
            self._logger.warning(
                "Cannot route message to unknown agent",
                message_id=message.id,
                message_type=message.type.value,
                from_agent_id=message.from_agent_id,
                to_agent_id=message.to_agent_id,
                task_id=message.task_id,
            )
            return False

        self._logger.debug(
            "Routing message",
            message_id=message.id,
            message_type=message.type.value,
            from_agent_id=message.from_agent_id,
            to_agent_id=message.to_agent_id,
        )
        return self.message_bus.publish(message)

    def _handle_message(self, message: AgentMessage) -> bool:
        """Handle a message addressed to the orchestrator."""
        if message.type not in (MessageType.TASK_UPDATE, MessageType.TASK_COMPLETED):
            self._logger.warning(
                "Dropping unsupported orchestrator message",
                message_id=message.id,
                message_type=message.type.value,
                from_agent_id=message.from_agent_id,
            )
            return False

        content = message.content
        task_id = content.get("task_id") or message.task_id
        status = content.get("status")
        if status is None and message.type == MessageType.TASK_COMPLETED:
            status = TaskStatus.COMPLETED
        if task_id is None or status is None:
            self._logger.warning(
                "Dropping incomplete status message",
                message_id=message.id,
                message_type=message.type.value,
                task_id=task_id,
            )
            return False

        try:
            return self.update_task_status(task_id, status, content.get("result"))
        except ValueError as e:
            self._logger.error(
                "Invalid status message",
                message_id=message.id,
                task_id=task_id,
                error=str(e),
            )
            return False

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def _assign_task(self, task: Task) -> None:
        """Pick a random agent of the task's type and send it the task."""
        candidates = self.registry.agents_of_type(task.agent_type)
        if not candidates:
            self._logger.warning(
                "No agent available for task",
                task_id=task.id,
                agent_type=task.agent_type.value,
            )
            return

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self._logger.warning(
                "No running event loop, task left pending",
                task_id=task.id,
                agent_type=task.agent_type.value,
            )
            return

        agent = self._rng.choice(candidates)
        task.mark_assigned(agent.id)
        self._logger.info(
            "Task assigned",
            task_id=task.id,
            agent_id=agent.id,
            agent_name=agent.name,
            candidates=len(candidates),
        )
        self.route_message(
            AgentMessage.task_assignment(
                to_agent_id=agent.id,
                task=task.model_copy(deep=True),
                task_id=task.id,
            )
        )

    def _create_follow_ups(self, parent: Task, next_tasks: list[FollowUpTask]) -> None:
        """Create one task per follow-up entry, inheriting from the parent."""
        for follow_up in next_tasks:
            self.create_task(
                title=follow_up.title or FOLLOW_UP_TITLE,
                description=follow_up.description or "",
                agent_type=follow_up.agent_type or parent.agent_type,
                context=dict(follow_up.context),
                priority=follow_up.priority or parent.priority,
                parent_task_id=parent.id,
            )
