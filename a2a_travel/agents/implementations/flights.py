"""Flight Booking Agent - flight search, recommendations and route safety.

Searches try the primary flight API first and fall back to the simulated
search when it is not configured, fails, or returns nothing. Results are
tagged with the source that produced them.
"""

from typing import Any

from a2a_travel.agents.base import ActionAgent
from a2a_travel.models import AgentCapability, AgentType, CapabilityParameter, Task, TaskResult
from a2a_travel.services.flights import (
    Flight,
    FlightApiClient,
    FlightSearch,
    FlightSearchError,
    get_flight_pricing_trends,
    get_flight_recommendations,
    search_flights,
)
from a2a_travel.utils.config import AgentSettings

PRIMARY_SOURCE = "primary-api"
FALLBACK_SOURCE = "fallback"


def _dump(flights: list[Flight]) -> list[dict[str, Any]]:
    return [flight.model_dump(mode="json", exclude_none=True) for flight in flights]


class FlightBookingAgent(ActionAgent):
    """Agent handling flight search tasks."""

    def __init__(
        self,
        name: str = "Flight Booking Agent",
        settings: AgentSettings | None = None,
        api_client: FlightApiClient | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            name: Display name.
            settings: Shared agent settings.
            api_client: Primary flight source; disabled by default.
        """
        super().__init__(name, AgentType.FLIGHT_BOOKING, settings)
        self._api = api_client or FlightApiClient()
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.register_action(
            AgentCapability(
                action="search_flights",
                description="Search for flights between destinations on specific dates",
                parameters={
                    "departure_city": CapabilityParameter(
                        type="string", description="City of departure"
                    ),
                    "arrival_city": CapabilityParameter(
                        type="string", description="City of arrival"
                    ),
                    "departure_date": CapabilityParameter(
                        type="string", description="Date of departure (YYYY-MM-DD)"
                    ),
                    "return_date": CapabilityParameter(
                        type="string",
                        description="Date of return for round-trip flights (YYYY-MM-DD)",
                        required=False,
                    ),
                    "skip_safety_check": CapabilityParameter(
                        type="boolean",
                        description="Skip the destination safety check",
                        required=False,
                        default=False,
                    ),
                },
                examples=[
                    {
                        "departure_city": "New York",
                        "arrival_city": "Tokyo",
                        "departure_date": "2025-06-15",
                        "return_date": "2025-06-30",
                    }
                ],
            ),
            self._search_flights,
        )
        self.register_action(
            AgentCapability(
                action="get_flight_recommendations",
                description="Get flight recommendations for a specific destination",
                parameters={
                    "destination": CapabilityParameter(
                        type="string",
                        description="The destination to get flight recommendations for",
                    ),
                    "departure_city": CapabilityParameter(
                        type="string",
                        description="City of departure",
                        required=False,
                        default="New York",
                    ),
                },
                examples=[
                    {
                        "destination": "Paris",
                        "result": {"all": "...", "cheapest_by_airline": "..."},
                    }
                ],
            ),
            self._get_flight_recommendations,
        )
        self.register_action(
            AgentCapability(
                action="check_flight_route_safety",
                description="Check if a flight route goes through any high-risk countries",
                parameters={
                    "departure_city": CapabilityParameter(
                        type="string", description="City of departure"
                    ),
                    "arrival_city": CapabilityParameter(
                        type="string", description="City of arrival"
                    ),
                    "stopover_cities": CapabilityParameter(
                        type="array",
                        items={"type": "string"},
                        description="List of stopover cities",
                        required=False,
                    ),
                },
            ),
            self._check_flight_route_safety,
        )

        self.register_query("flight_availability", self._flight_availability)
        self.register_query("get_cheapest_flight", self._get_cheapest_flight)

    async def _search(self, search: FlightSearch) -> tuple[list[Flight], str]:
        """Search the primary source, falling back to the simulated one."""
        if self._api.enabled:
            try:
                flights = await self._api.search(search)
                if flights:
                    self.logger.info(
                        "Flights found with primary API", count=len(flights)
                    )
                    return flights, PRIMARY_SOURCE
                self.logger.info("Primary API returned no flights, falling back")
            except FlightSearchError as e:
                self.logger.warning(
                    "Primary flight API failed, falling back",
                    error=e.message,
                    status_code=e.status_code,
                )
        return await search_flights(search), FALLBACK_SOURCE

    @staticmethod
    def _criteria(params: dict[str, Any]) -> FlightSearch:
        return FlightSearch(
            departure_city=params["departure_city"],
            arrival_city=params["arrival_city"],
            departure_date=params["departure_date"],
            return_date=params.get("return_date") or None,
            adults=params.get("adults") or 1,
        )

    async def _search_flights(self, task: Task) -> TaskResult:
        ctx = task.context
        if missing := self.require(ctx, "departure_city", "arrival_city", "departure_date"):
            return missing
        search = self._criteria(ctx)

        if not ctx.get("skip_safety_check") and await self.check_destination_risk(
            search.arrival_city, task.id
        ):
            return self.safety_warning(search.arrival_city)

        flights, source = await self._search(search)
        return TaskResult.ok(
            {
                "flights": _dump(flights),
                "pricing_trends": get_flight_pricing_trends(
                    search.departure_city, search.arrival_city
                ),
                "source": source,
            }
        )

    async def _get_flight_recommendations(self, task: Task) -> TaskResult:
        ctx = task.context
        if missing := self.require(ctx, "destination"):
            return missing
        destination = ctx["destination"]

        if not ctx.get("skip_safety_check") and await self.check_destination_risk(
            destination, task.id
        ):
            return self.safety_warning(destination)

        recommendations = await get_flight_recommendations(
            destination,
            departure_city=ctx.get("departure_city") or "New York",
            departure_date=ctx.get("departure_date"),
        )
        return TaskResult.ok(
            {key: _dump(flights) for key, flights in recommendations.items()}
        )

    async def _check_flight_route_safety(self, task: Task) -> TaskResult:
        ctx = task.context
        if missing := self.require(ctx, "departure_city", "arrival_city"):
            return missing

        route = [ctx["departure_city"], *(ctx.get("stopover_cities") or []), ctx["arrival_city"]]
        risky_destinations = []
        for city in route:
            if await self.check_destination_risk(city, task.id):
                risky_destinations.append(city)

        return TaskResult.ok(
            {
                "route": route,
                "risky_destinations": risky_destinations,
                "is_safe": not risky_destinations,
            }
        )

    async def _flight_availability(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "departure_city", "arrival_city", "departure_date")
        flights, source = await self._search(self._criteria(query))
        return {
            "flights": _dump(flights),
            "has_availability": bool(flights),
            "source": source,
        }

    async def _get_cheapest_flight(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "departure_city", "arrival_city", "departure_date")
        flights, _ = await self._search(self._criteria(query))
        cheapest = min(flights, key=lambda f: f.price) if flights else None
        return {
            "cheapest_flight": cheapest.model_dump(mode="json", exclude_none=True)
            if cheapest
            else None
        }
