"""Accommodation Agent unit tests."""

import httpx
import pytest

from a2a_travel.agents import AccommodationAgent
from a2a_travel.agents.implementations.accommodation import (
    FALLBACK_SOURCE,
    PRIMARY_SOURCE,
)
from a2a_travel.models import AgentType, TaskStatus
from a2a_travel.services.hotels import HotelApiClient
from a2a_travel.utils.config import ProviderConfig

SEARCH = {
    "action": "search_hotels",
    "location": "Tokyo",
    "check_in": "2025-06-15",
    "check_out": "2025-06-20",
    "guests": 2,
}


async def run_task(orchestrator, context: dict):
    """Create an accommodation task and wait for it to finish."""
    task = orchestrator.create_task(
        "Hotel task", "d", AgentType.ACCOMMODATION, context
    )
    return await orchestrator.wait_for_task(task.id, timeout=2.0)


class TestAccommodationAgent:
    """Test AccommodationAgent with the hotel table."""

    @pytest.fixture
    def orchestrator(self, orchestrator, accommodation_agent):
        orchestrator.register_agent(accommodation_agent)
        return orchestrator

    def test_capabilities(self, accommodation_agent):
        """Test declared capabilities."""
        assert accommodation_agent.get_info().get_actions() == [
            "search_hotels",
            "get_hotel_details",
            "check_hotel_area_safety",
        ]
        assert accommodation_agent.queries == [
            "hotel_availability",
            "hotel_details",
            "recommend_hotels",
        ]

    @pytest.mark.asyncio
    async def test_search_hotels(self, orchestrator):
        """Test searching hotels by location."""
        task = await run_task(orchestrator, {**SEARCH, "location": "tokyo"})

        data = task.result.data
        assert data["source"] == FALLBACK_SOURCE
        assert [h["id"] for h in data["hotels"]] == ["h001"]
        assert 1 <= data["hotels"][0]["available_rooms"] <= 5

    @pytest.mark.asyncio
    async def test_search_hotels_max_price(self, orchestrator):
        """Test the nightly price ceiling."""
        task = await run_task(orchestrator, {**SEARCH, "max_price": 200})

        assert task.result.success is True
        assert task.result.data["hotels"] == []

    @pytest.mark.asyncio
    async def test_search_unknown_location(self, orchestrator):
        """Test locations without hotels give an empty list."""
        task = await run_task(orchestrator, {**SEARCH, "location": "Atlantis"})

        assert task.result.success is True
        assert task.result.data["hotels"] == []

    @pytest.mark.asyncio
    async def test_search_risky_location(self, orchestrator):
        """Test risky locations return a safety warning and a follow-up."""
        task = await run_task(orchestrator, {**SEARCH, "location": "Ukraine"})

        assert "safety_warning" in task.result.data
        (follow_up,) = orchestrator.get_subtasks(task.id)
        assert follow_up.agent_type == AgentType.TRAVEL_SAFETY

    @pytest.mark.asyncio
    async def test_hotel_details(self, orchestrator):
        """Test hotel details lookup."""
        found = await run_task(
            orchestrator, {"action": "get_hotel_details", "hotel_id": "h003"}
        )
        missing = await run_task(
            orchestrator, {"action": "get_hotel_details", "hotel_id": "h999"}
        )

        assert found.result.data["hotel"]["name"] == "City Comfort Inn"
        assert missing.status == TaskStatus.COMPLETED
        assert missing.result.success is False
        assert missing.result.error == "Hotel with ID h999 not found"

    @pytest.mark.asyncio
    async def test_hotel_area_safety(self, orchestrator):
        """Test area safety analysis for a hotel."""
        task = await run_task(
            orchestrator, {"action": "check_hotel_area_safety", "hotel_id": "h005"}
        )

        assert task.result.data == {
            "hotel": {"id": "h005", "name": "Desert Oasis Resort", "location": "Dubai"},
            "safety_analysis": {
                "is_safe": True,
                "area_rating": "safe",
                "notes": "No known safety issues in this area.",
            },
        }

    @pytest.mark.asyncio
    async def test_queries(self, orchestrator, accommodation_agent, safety_agent):
        """Test availability, details and recommendation queries."""
        orchestrator.register_agent(safety_agent)
        stay = {"location": "Paris", "check_in": "2025-06-15", "check_out": "2025-06-20"}

        availability = await safety_agent.ask(
            accommodation_agent.id, {"type": "hotel_availability", **stay}
        )
        details = await safety_agent.ask(
            accommodation_agent.id, {"type": "hotel_details", "hotel_id": "h404"}
        )
        recommendations = await safety_agent.ask(
            accommodation_agent.id, {"type": "recommend_hotels", **stay}
        )

        assert availability["response"]["has_availability"] is True
        assert details["response"] == {"hotel": None}
        assert [h["id"] for h in recommendations["response"]["recommendations"]] == [
            "h003"
        ]


class TestAccommodationAgentPrimarySource:
    """Test primary API use and fallback."""

    @pytest.mark.asyncio
    async def test_primary_source(self, orchestrator):
        """Test results from the primary API are tagged as such."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    "hotels": [
                        {
                            "id": "api-1",
                            "name": "API Hotel",
                            "location": "Tokyo",
                            "rating": 4.0,
                            "price_per_night": 120,
                        }
                    ]
                },
            )

        client = HotelApiClient(
            ProviderConfig(base_url="https://hotels.example.test"),
            transport=httpx.MockTransport(handler),
        )
        orchestrator.register_agent(AccommodationAgent(api_client=client))

        task = await run_task(orchestrator, SEARCH)

        assert task.result.data["source"] == PRIMARY_SOURCE
        assert task.result.data["hotels"][0]["name"] == "API Hotel"
        assert requests[0].url.path == "/hotels/search"
        assert requests[0].url.params["location"] == "Tokyo"

    @pytest.mark.asyncio
    async def test_fallback_on_error(self, orchestrator):
        """Test API errors fall back to the hotel table."""
        client = HotelApiClient(
            ProviderConfig(base_url="https://hotels.example.test"),
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        orchestrator.register_agent(AccommodationAgent(api_client=client))

        task = await run_task(orchestrator, SEARCH)

        assert task.result.data["source"] == FALLBACK_SOURCE
        assert [h["id"] for h in task.result.data["hotels"]] == ["h001"]
