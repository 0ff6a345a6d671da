"""Base Agent - Abstract base classes for all agents.

This module defines:

- ``BaseAgent``: the worker contract. Agents receive messages from the
  orchestrator, run their handlers as coroutines on the running event
  loop, and report status back through messages. Information requests
  get replies through a correlation table keyed by request message id.
- ``ActionAgent``: the template used by the concrete travel agents.
  Actions and queries are registered as handlers, and each action is
  registered together with the capability that describes it.
"""

from __future__ import annotations

import asyncio
import uuid
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any

from a2a_travel.models import (
    ORCHESTRATOR_ID,
    AgentCapability,
    AgentInfo,
    AgentMessage,
    AgentStatus,
    AgentType,
    FollowUpTask,
    MessageType,
    Task,
    TaskResult,
    TaskStatus,
)
from a2a_travel.services.safety import check_destination_safety
from a2a_travel.utils.config import AgentSettings
from a2a_travel.utils.exceptions import A2ATravelError, InformationRequestTimeout
from a2a_travel.utils.logging import (
    clear_task_context,
    get_agent_logger,
    set_task_context,
)

if TYPE_CHECKING:
    from a2a_travel.core.orchestrator import Orchestrator

# Type aliases for registered handlers
ActionHandler = Callable[[Task], Awaitable[TaskResult]]
QueryHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


class AgentError(A2ATravelError):
    """Base exception for agent-related errors."""

    pass


class MessageDeliveryError(AgentError):
    """Raised when an agent's message could not be delivered."""

    pass


class BaseAgent(ABC):
    """Abstract base class for all agents.

    Attributes:
        id: Unique identifier, assigned at construction.
        name: Display name.
        type: Agent type used for task matching.
        status: ``inactive`` until registered with an orchestrator.
    """

    def __init__(
        self,
        name: str,
        agent_type: AgentType,
        settings: AgentSettings | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            name: Display name.
            agent_type: Type of work the agent performs.
            settings: Shared agent settings (information request timeout).
        """
        self._id = str(uuid.uuid4())
        self._name = name
        self._type = agent_type
        self._status = AgentStatus.INACTIVE
        self._capabilities: list[AgentCapability] = []
        self._orchestrator: Orchestrator | None = None
        self._settings = settings or AgentSettings()
        self._pending_requests: dict[str, asyncio.Future[dict[str, Any]]] = {}
        self._in_flight: set[asyncio.Task[None]] = set()
        self.logger = get_agent_logger(self._id, name, agent_type.value)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> AgentType:
        return self._type

    @property
    def status(self) -> AgentStatus:
        return self._status

    @property
    def orchestrator(self) -> Orchestrator | None:
        return self._orchestrator

    @property
    def in_flight(self) -> int:
        """Number of handler coroutines still running."""
        return len(self._in_flight)

    @property
    def pending_requests(self) -> int:
        """Number of information requests awaiting a response."""
        return len(self._pending_requests)

    def get_info(self) -> AgentInfo:
        """Get a read-only snapshot of the agent."""
        return AgentInfo(
            id=self._id,
            name=self._name,
            type=self._type,
            capabilities=[cap.model_copy(deep=True) for cap in self._capabilities],
            status=self._status,
        )

    def register_capability(self, capability: AgentCapability) -> None:
        """Declare a capability. Registration order is preserved."""
        self._capabilities.append(capability)

    def set_orchestrator(self, orchestrator: Orchestrator) -> None:
        """Attach the orchestrator and mark the agent active."""
        self._orchestrator = orchestrator
        self._status = AgentStatus.ACTIVE

    # ------------------------------------------------------------------
    # Outbound messages
    # ------------------------------------------------------------------

    def _build_message(
        self,
        to_agent_id: str,
        message_type: MessageType,
        content: dict[str, Any],
        task_id: str | None = None,
        correlation_id: str | None = None,
    ) -> AgentMessage:
        return AgentMessage(
            from_agent_id=self._id,
            to_agent_id=to_agent_id,
            type=message_type,
            content=content,
            task_id=task_id,
            correlation_id=correlation_id,
        )

    def send_message(
        self,
        to_agent_id: str,
        message_type: MessageType,
        content: dict[str, Any],
        task_id: str | None = None,
        correlation_id: str | None = None,
    ) -> AgentMessage | None:
        """Build a message and hand it to the orchestrator for routing.

        Returns:
            The sent message, or None if the agent has no orchestrator.
        """
        if self._orchestrator is None:
            self.logger.error(
                "Cannot send message without an orchestrator",
                to_agent_id=to_agent_id,
                message_type=message_type.value,
                task_id=task_id,
            )
            return None

        message = self._build_message(
            to_agent_id, message_type, content, task_id, correlation_id
        )
        self._orchestrator.route_message(message)
        return message

    def update_task_status(
        self,
        task_id: str,
        status: TaskStatus,
        result: TaskResult | None = None,
    ) -> AgentMessage | None:
        """Report a status change to the orchestrator."""
        content: dict[str, Any] = {"task_id": task_id, "status": status}
        if result is not None:
            content["result"] = result
        return self.send_message(ORCHESTRATOR_ID, MessageType.TASK_UPDATE, content, task_id)

    def complete_task(self, task_id: str, result: TaskResult) -> AgentMessage | None:
        """Report a finished task to the orchestrator."""
        return self.send_message(
            ORCHESTRATOR_ID,
            MessageType.TASK_COMPLETED,
            {"task_id": task_id, "result": result},
            task_id,
        )

    def request_information(
        self,
        to_agent_id: str,
        query: dict[str, Any],
        task_id: str | None = None,
    ) -> asyncio.Future[dict[str, Any]]:
        """Send an information request to another agent.

        Must be called from a running event loop.

        Returns:
            Future resolved with the content of the matching
            ``information_response``. It fails with ``MessageDeliveryError``
            if the request could not be delivered.
        """
        future: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
        if self._orchestrator is None:
            self.logger.error(
                "Cannot request information without an orchestrator",
                to_agent_id=to_agent_id,
                query_type=query.get("type"),
            )
            future.set_exception(MessageDeliveryError("Agent has no orchestrator"))
            return future

        message = self._build_message(
            to_agent_id, MessageType.INFORMATION_REQUEST, {"query": dict(query)}, task_id
        )
        self._pending_requests[message.id] = future
        future.add_done_callback(
            lambda _f, key=message.id: self._pending_requests.pop(key, None)
        )

        if not self._orchestrator.route_message(message):
            future.set_exception(
                MessageDeliveryError(
                    f"Could not deliver information request to {to_agent_id}",
                    details={"to_agent_id": to_agent_id},
                )
            )
        return future

    async def ask(
        self,
        to_agent_id: str,
        query: dict[str, Any],
        task_id: str | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Send an information request and wait for the response.

        Args:
            to_agent_id: Agent to ask.
            query: Query payload; ``query["type"]`` selects the handler.
            task_id: Related task, if any.
            timeout: Seconds to wait; defaults to the configured timeout.

        Returns:
            The response content (``response`` or ``error``, plus
            ``original_query``).

        Raises:
            InformationRequestTimeout: If no response arrives in time.
            MessageDeliveryError: If the request could not be delivered.
        """
        if timeout is None:
            timeout = self._settings.information_request_timeout
        future = self.request_information(to_agent_id, query, task_id)
        try:
            return await asyncio.wait_for(future, timeout)
        except TimeoutError as e:
            raise InformationRequestTimeout(to_agent_id, query.get("type"), timeout) from e

    def reply(self, request: AgentMessage, content: dict[str, Any]) -> AgentMessage | None:
        """Answer an information request."""
        if self._orchestrator is None:
            self.logger.error(
                "Cannot reply without an orchestrator", request_id=request.id
            )
            return None
        response = AgentMessage.information_response(request, self._id, content)
        self._orchestrator.route_message(response)
        return response

    # ------------------------------------------------------------------
    # Inbound messages
    # ------------------------------------------------------------------

    def receive_message(self, message: AgentMessage) -> None:
        """Entry point for inbound messages.

        Task assignments and information requests are scheduled as
        coroutines on the running loop; responses resolve pending requests.
        Other message types are logged and dropped.
        """
        if message.type == MessageType.TASK_ASSIGNMENT:
            task = message.content.get("task")
            if isinstance(task, dict):
                task = Task.model_validate(task)
            if not isinstance(task, Task):
                self.logger.warning("Dropping assignment without a task", message_id=message.id)
                return
            self._spawn(self._run_task(task))
        elif message.type == MessageType.INFORMATION_REQUEST:
            self._spawn(self._run_information_request(message))
        elif message.type == MessageType.INFORMATION_RESPONSE:
            self._resolve_response(message)
        else:
            self.logger.warning(
                "Dropping unsupported message",
                message_id=message.id,
                message_type=message.type.value,
                from_agent_id=message.from_agent_id,
            )

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        handle = asyncio.get_running_loop().create_task(coro)
        self._in_flight.add(handle)
        handle.add_done_callback(self._in_flight.discard)

    async def _run_task(self, task: Task) -> None:
        set_task_context(task.id)
        try:
            self.logger.info("Task received", task_id=task.id, action=task.action)
            await self.handle_task_assignment(task)
        except Exception as e:
            self.logger.exception("Task handler failed", task_id=task.id, error=str(e))
            self.update_task_status(task.id, TaskStatus.FAILED, TaskResult.fail(str(e)))
        finally:
            clear_task_context()

    async def _run_information_request(self, message: AgentMessage) -> None:
        set_task_context(message.task_id)
        try:
            await self.handle_information_request(message)
        except Exception as e:
            self.logger.exception(
                "Information request handler failed", message_id=message.id
            )
            self.reply(
                message,
                {"error": str(e), "original_query": message.content.get("query")},
            )
        finally:
            clear_task_context()

    def _resolve_response(self, message: AgentMessage) -> None:
        future = (
            self._pending_requests.pop(message.correlation_id, None)
            if message.correlation_id
            else None
        )
        if future is None:
            self.logger.warning(
                "Dropping unsolicited information response",
                message_id=message.id,
                correlation_id=message.correlation_id,
                from_agent_id=message.from_agent_id,
            )
            return
        if not future.done():
            future.set_result(dict(message.content))

    async def drain(self) -> None:
        """Wait for all in-flight handler coroutines to finish."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    @abstractmethod
    async def handle_task_assignment(self, task: Task) -> None:
        """Execute an assigned task and report its outcome.

        Args:
            task: Snapshot of the assigned task.
        """
        pass

    @abstractmethod
    async def handle_information_request(self, message: AgentMessage) -> None:
        """Answer an information request from another agent.

        Args:
            message: The ``information_request`` message.
        """
        pass


class ActionAgent(BaseAgent):
    """Template for agents that dispatch tasks by ``context["action"]``.

    Each action is registered together with its capability descriptor, so
    every declared capability is dispatchable and vice versa. Information
    queries are dispatched by ``query["type"]``.
    """

    def __init__(
        self,
        name: str,
        agent_type: AgentType,
        settings: AgentSettings | None = None,
    ) -> None:
        super().__init__(name, agent_type, settings)
        self._actions: dict[str, ActionHandler] = {}
        self._queries: dict[str, QueryHandler] = {}

    @property
    def actions(self) -> list[str]:
        return list(self._actions)

    @property
    def queries(self) -> list[str]:
        return list(self._queries)

    def register_action(self, capability: AgentCapability, handler: ActionHandler) -> None:
        """Register a capability and the handler that implements it.

        Raises:
            ValueError: If the action is already registered.
        """
        if capability.action in self._actions:
            raise ValueError(f"Action already registered: {capability.action}")
        self.register_capability(capability)
        self._actions[capability.action] = handler

    def register_query(self, query_type: str, handler: QueryHandler) -> None:
        """Register the handler for an information query type.

        Raises:
            ValueError: If the query type is already registered.
        """
        if query_type in self._queries:
            raise ValueError(f"Query already registered: {query_type}")
        self._queries[query_type] = handler

    async def handle_task_assignment(self, task: Task) -> None:
        self.update_task_status(task.id, TaskStatus.IN_PROGRESS)
        result = await self.execute(task)
        self.logger.info(
            "Task finished", task_id=task.id, action=task.action, success=result.success
        )
        self.complete_task(task.id, result)

    async def execute(self, task: Task) -> TaskResult:
        """Run the handler registered for the task's action.

        Handler exceptions become failed results.
        """
        action = task.action
        handler = self._actions.get(action) if action else None
        if handler is None:
            return TaskResult.fail(f"Unknown action: {action}")
        try:
            return await handler(task)
        except Exception as e:
            self.logger.exception("Action failed", task_id=task.id, action=action)
            return TaskResult.fail(str(e))

    async def handle_information_request(self, message: AgentMessage) -> None:
        query: dict[str, Any] = message.content.get("query") or {}
        query_type = query.get("type")
        handler = self._queries.get(query_type) if query_type else None
        try:
            if handler is None:
                response: dict[str, Any] = {"error": f"Unknown query type: {query_type}"}
            else:
                response = await handler(query)
            content = {"response": response, "original_query": query}
        except Exception as e:
            self.logger.exception(
                "Query failed", message_id=message.id, query_type=query_type
            )
            content = {"error": str(e), "original_query": query}
        self.reply(message, content)

    @staticmethod
    def require(context: dict[str, Any], *fields: str) -> TaskResult | None:
        """Check that required context fields are present.

        Returns:
            A failed result naming the first missing field, or None.
        """
        for field in fields:
            if context.get(field) in (None, ""):
                return TaskResult.fail(f"{field} is required")
        return None

    @staticmethod
    def require_query(query: dict[str, Any], *fields: str) -> None:
        """Check that required query fields are present.

        Raises:
            ValueError: Naming the first missing field.
        """
        for field in fields:
            if query.get(field) in (None, ""):
                raise ValueError(f"{field} is required")

    async def check_destination_risk(
        self, destination: str, task_id: str | None = None
    ) -> bool:
        """Whether a destination should be treated as risky.

        Asks a registered travel safety agent when one exists and falls
        back to the local advisory table otherwise.
        """
        safety_agents = []
        if self._orchestrator is not None:
            safety_agents = [
                info
                for info in self._orchestrator.get_agents_by_type(AgentType.TRAVEL_SAFETY)
                if info.id != self._id
            ]

        if safety_agents:
            query = {"type": "is_destination_safe", "destination": destination}
            try:
                reply = await self.ask(safety_agents[0].id, query, task_id)
                response = reply.get("response") or {}
                if "is_safe" in response:
                    return not response["is_safe"]
                self.logger.warning(
                    "Safety agent gave no verdict",
                    destination=destination,
                    reply=reply,
                )
            except (InformationRequestTimeout, MessageDeliveryError) as e:
                self.logger.warning(
                    "Safety agent unavailable, using local advisories",
                    destination=destination,
                    error=str(e),
                )

        return not check_destination_safety(destination).safe

    @staticmethod
    def safety_warning(destination: str) -> TaskResult:
        """Successful result carrying a safety warning and an alternatives follow-up."""
        return TaskResult.ok(
            data={
                "safety_warning": (
                    f"Travel to {destination} may not be advisable due to safety concerns."
                )
            },
            next_tasks=[
                FollowUpTask(
                    title="Suggest alternative destinations",
                    description=f"Find safer alternatives to {destination}",
                    agent_type=AgentType.TRAVEL_SAFETY,
                    context={
                        "action": "suggest_safe_alternatives",
                        "destination": destination,
                    },
                )
            ],
        )
