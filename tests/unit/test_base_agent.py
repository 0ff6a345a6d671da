"""Base Agent unit tests."""

import asyncio
from typing import Any

import pytest

from a2a_travel.agents.base import ActionAgent, BaseAgent, MessageDeliveryError
from a2a_travel.models import (
    AgentCapability,
    AgentMessage,
    AgentStatus,
    AgentType,
    MessageType,
    Task,
    TaskResult,
    TaskStatus,
)
from a2a_travel.utils.config import AgentSettings
from a2a_travel.utils.exceptions import InformationRequestTimeout


class EchoAgent(BaseAgent):
    """Agent that echoes queries and optionally fails its tasks."""

    def __init__(self, fail_with: Exception | None = None, silent: bool = False):
        super().__init__(
            "Echo Agent",
            AgentType.ITINERARY_PLANNER,
            AgentSettings(information_request_timeout=0.5),
        )
        self.fail_with = fail_with
        self.silent = silent

    async def handle_task_assignment(self, task: Task) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.complete_task(task.id, TaskResult.ok({"echo": task.context}))

    async def handle_information_request(self, message: AgentMessage) -> None:
        if self.silent:
            return
        query = message.content.get("query")
        self.reply(message, {"response": {"echo": query}, "original_query": query})


class CalculatorAgent(ActionAgent):
    """ActionAgent with a couple of registered actions and queries."""

    def __init__(self):
        super().__init__("Calculator", AgentType.ITINERARY_PLANNER)
        self.register_action(
            AgentCapability(action="add", description="Add two numbers"), self._add
        )
        self.register_action(
            AgentCapability(action="divide", description="Divide two numbers"),
            self._divide,
        )
        self.register_query("square", self._square)

    async def _add(self, task: Task) -> TaskResult:
        if missing := self.require(task.context, "a", "b"):
            return missing
        return TaskResult.ok(task.context["a"] + task.context["b"])

    async def _divide(self, task: Task) -> TaskResult:
        return TaskResult.ok(task.context["a"] / task.context["b"])

    async def _square(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "value")
        return {"value": query["value"] ** 2}


class TestBaseAgent:
    """Test BaseAgent messaging."""

    def test_initial_state(self):
        """Test a new agent is inactive with a fresh id."""
        agent = EchoAgent()
        other = EchoAgent()

        info = agent.get_info()
        assert info.status == AgentStatus.INACTIVE
        assert info.type == AgentType.ITINERARY_PLANNER
        assert agent.id != other.id
        assert agent.orchestrator is None

    def test_capabilities_keep_registration_order(self):
        """Test capabilities are listed in registration order."""
        agent = EchoAgent()
        for action in ("b_action", "a_action", "c_action"):
            agent.register_capability(AgentCapability(action=action, description=action))

        assert agent.get_info().get_actions() == ["b_action", "a_action", "c_action"]

    def test_send_without_orchestrator(self):
        """Test sending without an orchestrator is a logged no-op."""
        agent = EchoAgent()

        message = agent.send_message("other", MessageType.TASK_UPDATE, {})

        assert message is None
        assert agent.update_task_status("task", TaskStatus.COMPLETED) is None

    @pytest.mark.asyncio
    async def test_ask_without_orchestrator(self):
        """Test information requests fail without an orchestrator."""
        agent = EchoAgent()

        with pytest.raises(MessageDeliveryError):
            await agent.ask("other", {"type": "ping"})

    @pytest.mark.asyncio
    async def test_ask_gets_correlated_reply(self, orchestrator):
        """Test a request resolves with the matching response."""
        asker, answerer = EchoAgent(), EchoAgent()
        orchestrator.register_agent(asker)
        orchestrator.register_agent(answerer)

        reply = await asker.ask(answerer.id, {"type": "ping", "value": 1})

        assert reply == {
            "response": {"echo": {"type": "ping", "value": 1}},
            "original_query": {"type": "ping", "value": 1},
        }
        assert asker.pending_requests == 0

    @pytest.mark.asyncio
    async def test_concurrent_requests_are_not_mixed_up(self, orchestrator):
        """Test concurrent requests each get their own response."""
        asker, answerer = EchoAgent(), EchoAgent()
        orchestrator.register_agent(asker)
        orchestrator.register_agent(answerer)

        replies = await asyncio.gather(
            *(asker.ask(answerer.id, {"type": "ping", "value": i}) for i in range(5))
        )

        assert [r["response"]["echo"]["value"] for r in replies] == list(range(5))

    @pytest.mark.asyncio
    async def test_ask_times_out(self, orchestrator):
        """Test a request without a response times out."""
        asker, silent = EchoAgent(), EchoAgent(silent=True)
        orchestrator.register_agent(asker)
        orchestrator.register_agent(silent)

        with pytest.raises(InformationRequestTimeout) as exc_info:
            await asker.ask(silent.id, {"type": "ping"}, timeout=0.05)
        await asyncio.sleep(0)

        assert exc_info.value.agent_id == silent.id
        assert exc_info.value.query_type == "ping"
        assert asker.pending_requests == 0

    @pytest.mark.asyncio
    async def test_ask_unknown_agent(self, orchestrator):
        """Test a request to an unknown agent fails fast."""
        asker = EchoAgent()
        orchestrator.register_agent(asker)

        with pytest.raises(MessageDeliveryError):
            await asker.ask("unknown", {"type": "ping"})

    @pytest.mark.asyncio
    async def test_unsolicited_response_is_dropped(self, orchestrator):
        """Test a response nobody waits for is ignored."""
        agent = EchoAgent()
        orchestrator.register_agent(agent)

        agent.receive_message(
            AgentMessage(
                from_agent_id="other",
                to_agent_id=agent.id,
                type=MessageType.INFORMATION_RESPONSE,
                content={"response": {}},
                correlation_id="not-a-request",
            )
        )

        assert agent.pending_requests == 0
        assert agent.in_flight == 0

    @pytest.mark.asyncio
    async def test_handler_exception_fails_task(self, orchestrator):
        """Test an escaping handler exception marks the task failed."""
        orchestrator.register_agent(EchoAgent(fail_with=RuntimeError("boom")))

        task = orchestrator.create_task("t", "d", AgentType.ITINERARY_PLANNER)
        finished = await orchestrator.wait_for_task(task.id, timeout=1.0)

        assert finished.status == TaskStatus.FAILED
        assert finished.result.success is False
        assert finished.result.error == "boom"

    @pytest.mark.asyncio
    async def test_drain_waits_for_handlers(self, orchestrator):
        """Test drain waits for in-flight handlers."""
        agent = EchoAgent()
        orchestrator.register_agent(agent)

        task = orchestrator.create_task("t", "d", AgentType.ITINERARY_PLANNER)
        assert agent.in_flight == 1
        await agent.drain()

        assert agent.in_flight == 0
        assert orchestrator.get_task(task.id).status == TaskStatus.COMPLETED


class TestActionAgent:
    """Test ActionAgent dispatch."""

    def test_actions_are_capabilities(self):
        """Test every registered action is declared as a capability."""
        agent = CalculatorAgent()

        assert agent.actions == ["add", "divide"]
        assert agent.get_info().get_actions() == agent.actions
        assert agent.queries == ["square"]

    def test_duplicate_registration(self):
        """Test registering an action or query twice raises error."""
        agent = CalculatorAgent()

        with pytest.raises(ValueError):
            agent.register_action(
                AgentCapability(action="add", description="again"), agent._add
            )
        with pytest.raises(ValueError):
            agent.register_query("square", agent._square)

    def test_require(self):
        """Test required context helper."""
        assert ActionAgent.require({"a": 1, "b": 2}, "a", "b") is None
        missing = ActionAgent.require({"a": 1, "b": ""}, "a", "b")
        assert missing.error == "b is required"

    @pytest.mark.asyncio
    async def test_action_dispatch(self, orchestrator):
        """Test tasks run the handler registered for their action."""
        orchestrator.register_agent(CalculatorAgent())

        task = orchestrator.create_task(
            "Add", "d", AgentType.ITINERARY_PLANNER, {"action": "add", "a": 2, "b": 3}
        )
        finished = await orchestrator.wait_for_task(task.id, timeout=1.0)

        assert finished.status == TaskStatus.COMPLETED
        assert finished.result.data == 5

    @pytest.mark.asyncio
    async def test_business_failures_complete_unsuccessfully(self, orchestrator):
        """Test unknown actions and handler errors give unsuccessful results."""
        orchestrator.register_agent(CalculatorAgent())

        unknown = orchestrator.create_task(
            "t", "d", AgentType.ITINERARY_PLANNER, {"action": "multiply"}
        )
        missing = orchestrator.create_task(
            "t", "d", AgentType.ITINERARY_PLANNER, {"action": "add", "a": 1}
        )
        broken = orchestrator.create_task(
            "t", "d", AgentType.ITINERARY_PLANNER, {"action": "divide", "a": 1, "b": 0}
        )
        results = await orchestrator.wait_for_tasks(
            [unknown.id, missing.id, broken.id], timeout=1.0
        )

        assert all(t.status == TaskStatus.COMPLETED for t in results)
        assert all(t.result.success is False for t in results)
        assert results[0].result.error == "Unknown action: multiply"
        assert results[1].result.error == "b is required"
        assert "division by zero" in results[2].result.error

    @pytest.mark.asyncio
    async def test_query_dispatch(self, orchestrator):
        """Test information requests run the registered query handler."""
        calculator, asker = CalculatorAgent(), EchoAgent()
        orchestrator.register_agent(calculator)
        orchestrator.register_agent(asker)

        ok = await asker.ask(calculator.id, {"type": "square", "value": 4})
        unknown = await asker.ask(calculator.id, {"type": "cube", "value": 4})
        invalid = await asker.ask(calculator.id, {"type": "square"})

        assert ok == {
            "response": {"value": 16},
            "original_query": {"type": "square", "value": 4},
        }
        assert unknown["response"] == {"error": "Unknown query type: cube"}
        assert invalid == {
            "error": "value is required",
            "original_query": {"type": "square"},
        }
