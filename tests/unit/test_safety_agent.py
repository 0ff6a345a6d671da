"""Travel Safety Agent unit tests."""

import pytest

from a2a_travel.models import AgentType, TaskStatus


async def run_task(orchestrator, context: dict):
    """Create a travel safety task and wait for it to finish."""
    task = orchestrator.create_task(
        "Safety task", "d", AgentType.TRAVEL_SAFETY, context
    )
    return await orchestrator.wait_for_task(task.id, timeout=1.0)


class TestTravelSafetyAgent:
    """Test TravelSafetyAgent actions and queries."""

    @pytest.fixture
    def orchestrator(self, orchestrator, safety_agent):
        orchestrator.register_agent(safety_agent)
        return orchestrator

    def test_capabilities(self, safety_agent):
        """Test declared capabilities."""
        assert safety_agent.type == AgentType.TRAVEL_SAFETY
        assert safety_agent.get_info().get_actions() == [
            "check_destination_safety",
            "get_high_risk_destinations",
            "check_sanctions",
            "suggest_safe_alternatives",
        ]
        assert safety_agent.queries == ["is_destination_safe", "get_safety_details"]

    @pytest.mark.asyncio
    async def test_unsafe_destination(self, orchestrator):
        """Test a do-not-travel destination."""
        task = await run_task(
            orchestrator, {"action": "check_destination_safety", "destination": "Ukraine"}
        )

        assert task.status == TaskStatus.COMPLETED
        data = task.result.data
        assert data["safe"] is False
        assert data["advisory"]["country"] == "Ukraine"
        assert data["advisory"]["level"] == "do_not_travel"

    @pytest.mark.asyncio
    async def test_unlisted_destination_is_safe(self, orchestrator):
        """Test destinations without an advisory are safe."""
        task = await run_task(
            orchestrator, {"action": "check_destination_safety", "destination": "Tokyo"}
        )

        assert task.result.data == {"safe": True}

    @pytest.mark.asyncio
    async def test_missing_destination(self, orchestrator):
        """Test a missing parameter gives an unsuccessful result."""
        task = await run_task(orchestrator, {"action": "check_destination_safety"})

        assert task.status == TaskStatus.COMPLETED
        assert task.result.success is False
        assert task.result.error == "destination is required"

    @pytest.mark.asyncio
    async def test_high_risk_destinations(self, orchestrator):
        """Test listing do-not-travel destinations."""
        task = await run_task(orchestrator, {"action": "get_high_risk_destinations"})

        destinations = task.result.data["destinations"]
        assert "Ukraine" in destinations
        assert "Syria" in destinations
        assert "Venezuela" not in destinations

    @pytest.mark.asyncio
    async def test_check_sanctions(self, orchestrator):
        """Test sanctions lookup."""
        iran = await run_task(orchestrator, {"action": "check_sanctions", "country": "Iran"})
        japan = await run_task(
            orchestrator, {"action": "check_sanctions", "country": "Japan"}
        )

        assert iran.result.data == {"country": "Iran", "has_sanctions": True}
        assert japan.result.data == {"country": "Japan", "has_sanctions": False}

    @pytest.mark.asyncio
    async def test_suggest_safe_alternatives(self, orchestrator):
        """Test alternatives by region and the default list."""
        regional = await run_task(
            orchestrator,
            {
                "action": "suggest_safe_alternatives",
                "destination": "Syria",
                "region": "middle_east",
            },
        )
        default = await run_task(
            orchestrator, {"action": "suggest_safe_alternatives", "destination": "Ukraine"}
        )

        assert regional.result.data["alternatives"] == [
            "Jordan",
            "Oman",
            "United Arab Emirates",
            "Qatar",
        ]
        assert default.result.data["region"] is None
        assert "Portugal" in default.result.data["alternatives"]

    @pytest.mark.asyncio
    async def test_is_destination_safe_query(self, orchestrator, safety_agent, flight_agent):
        """Test the safety verdict query."""
        orchestrator.register_agent(flight_agent)

        reply = await flight_agent.ask(
            safety_agent.id, {"type": "is_destination_safe", "destination": "Syria"}
        )

        assert reply["original_query"]["destination"] == "Syria"
        assert reply["response"]["is_safe"] is False
        assert reply["response"]["safety_info"]["advisory"]["country"] == "Syria"

    @pytest.mark.asyncio
    async def test_safety_details_query(self, orchestrator, safety_agent, flight_agent):
        """Test the advisory details query."""
        orchestrator.register_agent(flight_agent)

        region = await flight_agent.ask(
            safety_agent.id,
            {"type": "get_safety_details", "destination": "Eastern Ukraine"},
        )
        unknown = await flight_agent.ask(
            safety_agent.id, {"type": "get_safety_details", "destination": "Atlantis"}
        )

        details = region["response"]["details"]
        assert details["country"] == "Ukraine"
        assert details["details"].startswith("Eastern Ukraine in Ukraine:")
        assert unknown["response"] == {"details": None}
