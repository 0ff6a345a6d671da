"""End-to-end travel orchestration scenarios."""

import pytest

from a2a_travel.agents import AccommodationAgent, FlightBookingAgent, TravelSafetyAgent
from a2a_travel.core import Orchestrator, TravelPlanWorkflow, build_default_orchestrator
from a2a_travel.models import AgentType, TaskStatus
from a2a_travel.utils.config import AppConfig, WorkflowConfig


class TestTravelScenarios:
    """Scenarios running the orchestrator with the shipped agents."""

    @pytest.mark.asyncio
    async def test_safety_check_for_war_zone(self):
        """Test a safety-only setup flags a do-not-travel destination."""
        orchestrator = Orchestrator()
        orchestrator.register_agent(TravelSafetyAgent())

        task = orchestrator.create_task(
            "Check Ukraine",
            "Check travel advisories for Ukraine",
            AgentType.TRAVEL_SAFETY,
            {"action": "check_destination_safety", "destination": "Ukraine"},
        )
        await orchestrator.drain()

        result = orchestrator.get_task(task.id).result
        assert result.data["safe"] is False
        assert result.data["advisory"]["level"] == "do_not_travel"

    @pytest.mark.asyncio
    async def test_task_without_agent_stays_pending(self):
        """Test a task for an unregistered agent type is never assigned."""
        orchestrator = Orchestrator()
        orchestrator.register_agent(TravelSafetyAgent())

        task = orchestrator.create_task(
            "Search flights",
            "Find flights to Paris",
            AgentType.FLIGHT_BOOKING,
            {"action": "search_flights"},
        )
        await orchestrator.drain()

        stored = orchestrator.get_task(task.id)
        assert stored.status == TaskStatus.PENDING
        assert stored.assigned_agent_id is None

    @pytest.mark.asyncio
    async def test_flight_search_to_risky_destination(self):
        """Test a risky flight search yields a warning and one follow-up."""
        orchestrator = Orchestrator()
        orchestrator.register_agent(FlightBookingAgent())

        task = orchestrator.create_task(
            "Search flights",
            "Find flights to Ukraine",
            AgentType.FLIGHT_BOOKING,
            {
                "action": "search_flights",
                "departure_city": "New York",
                "arrival_city": "Ukraine",
                "departure_date": "2025-06-01",
                "skip_safety_check": False,
            },
        )
        await orchestrator.drain()

        result = orchestrator.get_task(task.id).result
        assert result.success is True
        assert result.data["safety_warning"]
        follow_ups = orchestrator.get_subtasks(task.id)
        assert len(follow_ups) == 1
        assert follow_ups[0].agent_type == AgentType.TRAVEL_SAFETY
        assert follow_ups[0].context["action"] == "suggest_safe_alternatives"

    @pytest.mark.asyncio
    async def test_hotel_search_without_matches(self):
        """Test an empty search is a success, not a failure."""
        orchestrator = Orchestrator()
        orchestrator.register_agent(AccommodationAgent())

        task = orchestrator.create_task(
            "Search hotels",
            "Find hotels in Reykjavik",
            AgentType.ACCOMMODATION,
            {
                "action": "search_hotels",
                "location": "Reykjavik",
                "check_in": "2025-06-01",
                "check_out": "2025-06-05",
            },
        )
        await orchestrator.drain()

        result = orchestrator.get_task(task.id).result
        assert result.success is True
        assert result.data["hotels"] == []

    @pytest.mark.asyncio
    async def test_orchestrators_do_not_share_state(self):
        """Test tasks of one orchestrator are invisible to another."""
        first = build_default_orchestrator()
        second = build_default_orchestrator()

        task = first.create_task(
            "Check Japan",
            "Check travel advisories for Japan",
            AgentType.TRAVEL_SAFETY,
            {"action": "check_destination_safety", "destination": "Japan"},
        )
        await first.drain()

        assert first.get_task(task.id) is not None
        assert second.get_task(task.id) is None
        assert second.get_all_tasks() == []
        assert not {a.id for a in first.get_agents()} & {a.id for a in second.get_agents()}

    def test_update_unknown_task(self):
        """Test updating a nonexistent task leaves the table unchanged."""
        orchestrator = Orchestrator()
        orchestrator.create_task("t", "d", AgentType.NOTIFICATION)
        before = orchestrator.get_all_tasks()

        assert orchestrator.update_task_status("nonexistent", TaskStatus.COMPLETED) is False
        assert orchestrator.get_all_tasks() == before


class TestTravelPlanScenario:
    """Full travel planning run."""

    @pytest.mark.asyncio
    async def test_plan_trip(self):
        """Test planning a trip with the default wiring."""
        config = AppConfig(workflow=WorkflowConfig(stage_timeout=5.0))
        orchestrator = build_default_orchestrator(config)
        workflow = TravelPlanWorkflow(orchestrator, config.workflow)

        plan = await workflow.plan_trip(
            "Dubai", "2025-10-01", "2025-10-08", 7000, departure_city="London"
        )
        await orchestrator.drain()

        assert plan.safety == {"safe": True}
        assert plan.flights["source"] == "fallback"
        assert plan.flights["pricing_trends"]["route"] == "London to Dubai"
        assert [h["name"] for h in plan.hotels["hotels"]] == ["Desert Oasis Resort"]
        assert len(plan.tasks) == 3
