"""Accommodation Agent - hotel search, details and area safety."""

from typing import Any

from a2a_travel.agents.base import ActionAgent
from a2a_travel.models import AgentCapability, AgentType, CapabilityParameter, Task, TaskResult
from a2a_travel.services.hotels import (
    Hotel,
    HotelApiClient,
    HotelSearchError,
    get_hotel_details,
    search_hotels,
)
from a2a_travel.utils.config import AgentSettings

PRIMARY_SOURCE = "primary-api"
FALLBACK_SOURCE = "fallback"
DEFAULT_GUESTS = 2


def _dump(hotels: list[Hotel]) -> list[dict[str, Any]]:
    return [hotel.model_dump(mode="json", exclude_none=True) for hotel in hotels]


class AccommodationAgent(ActionAgent):
    """Agent handling hotel search tasks."""

    def __init__(
        self,
        name: str = "Accommodation Agent",
        settings: AgentSettings | None = None,
        api_client: HotelApiClient | None = None,
    ) -> None:
        super().__init__(name, AgentType.ACCOMMODATION, settings)
        self._api = api_client or HotelApiClient()
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.register_action(
            AgentCapability(
                action="search_hotels",
                description="Search for hotels in a specific location",
                parameters={
                    "location": CapabilityParameter(
                        type="string", description="City or location to search for hotels"
                    ),
                    "check_in": CapabilityParameter(
                        type="string", description="Check-in date (YYYY-MM-DD)"
                    ),
                    "check_out": CapabilityParameter(
                        type="string", description="Check-out date (YYYY-MM-DD)"
                    ),
                    "guests": CapabilityParameter(
                        type="number",
                        description="Number of guests",
                        required=False,
                        default=DEFAULT_GUESTS,
                    ),
                    "max_price": CapabilityParameter(
                        type="number",
                        description="Maximum price per night",
                        required=False,
                    ),
                },
                examples=[
                    {
                        "location": "Tokyo",
                        "check_in": "2025-06-15",
                        "check_out": "2025-06-20",
                        "guests": 2,
                    }
                ],
            ),
            self._search_hotels,
        )
        self.register_action(
            AgentCapability(
                action="get_hotel_details",
                description="Get detailed information about a specific hotel",
                parameters={
                    "hotel_id": CapabilityParameter(
                        type="string", description="The ID of the hotel to get details for"
                    )
                },
                examples=[{"hotel_id": "h001"}],
            ),
            self._get_hotel_details,
        )
        self.register_action(
            AgentCapability(
                action="check_hotel_area_safety",
                description="Check if a hotel is located in a safe area",
                parameters={
                    "hotel_id": CapabilityParameter(
                        type="string", description="The ID of the hotel to check"
                    )
                },
            ),
            self._check_hotel_area_safety,
        )

        self.register_query("hotel_availability", self._hotel_availability)
        self.register_query("hotel_details", self._hotel_details)
        self.register_query("recommend_hotels", self._recommend_hotels)

    async def _search(
        self,
        location: str,
        check_in: str,
        check_out: str,
        guests: int = DEFAULT_GUESTS,
        max_price: float | None = None,
    ) -> tuple[list[Hotel], str]:
        """Search the primary source, falling back to the hotel table."""
        if self._api.enabled:
            try:
                hotels = await self._api.search(
                    location, check_in, check_out, guests, max_price
                )
                if hotels:
                    return hotels, PRIMARY_SOURCE
                self.logger.info("Primary API returned no hotels, falling back")
            except HotelSearchError as e:
                self.logger.warning(
                    "Primary hotel API failed, falling back",
                    error=e.message,
                    status_code=e.status_code,
                )
        hotels = await search_hotels(location, check_in, check_out, guests, max_price)
        return hotels, FALLBACK_SOURCE

    async def _search_hotels(self, task: Task) -> TaskResult:
        ctx = task.context
        if missing := self.require(ctx, "location", "check_in", "check_out"):
            return missing
        location = ctx["location"]

        if not ctx.get("skip_safety_check") and await self.check_destination_risk(
            location, task.id
        ):
            return self.safety_warning(location)

        hotels, source = await self._search(
            location,
            ctx["check_in"],
            ctx["check_out"],
            ctx.get("guests") or DEFAULT_GUESTS,
            ctx.get("max_price"),
        )
        return TaskResult.ok({"hotels": _dump(hotels), "source": source})

    async def _get_hotel_details(self, task: Task) -> TaskResult:
        if missing := self.require(task.context, "hotel_id"):
            return missing
        hotel_id = task.context["hotel_id"]
        hotel = await get_hotel_details(hotel_id)
        if hotel is None:
            return TaskResult.fail(f"Hotel with ID {hotel_id} not found")
        return TaskResult.ok({"hotel": hotel.model_dump(mode="json", exclude_none=True)})

    async def _check_hotel_area_safety(self, task: Task) -> TaskResult:
        if missing := self.require(task.context, "hotel_id"):
            return missing
        hotel_id = task.context["hotel_id"]
        hotel = await get_hotel_details(hotel_id)
        if hotel is None:
            return TaskResult.fail(f"Hotel with ID {hotel_id} not found")

        risky = await self.check_destination_risk(hotel.location, task.id)
        return TaskResult.ok(
            {
                "hotel": {"id": hotel.id, "name": hotel.name, "location": hotel.location},
                "safety_analysis": {
                    "is_safe": not risky,
                    "area_rating": "high_risk" if risky else "safe",
                    "notes": (
                        "The area where this hotel is located may have safety concerns."
                        if risky
                        else "No known safety issues in this area."
                    ),
                },
            }
        )

    async def _hotel_availability(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "location", "check_in", "check_out")
        hotels, source = await self._search(
            query["location"],
            query["check_in"],
            query["check_out"],
            query.get("guests") or DEFAULT_GUESTS,
            query.get("max_price"),
        )
        return {"hotels": _dump(hotels), "has_availability": bool(hotels), "source": source}

    async def _hotel_details(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "hotel_id")
        hotel = await get_hotel_details(query["hotel_id"])
        return {"hotel": hotel.model_dump(mode="json", exclude_none=True) if hotel else None}

    async def _recommend_hotels(self, query: dict[str, Any]) -> dict[str, Any]:
        self.require_query(query, "location", "check_in", "check_out")
        hotels, _ = await self._search(
            query["location"],
            query["check_in"],
            query["check_out"],
            query.get("guests") or DEFAULT_GUESTS,
        )
        top = sorted(hotels, key=lambda h: h.rating, reverse=True)[:3]
        return {"recommendations": _dump(top)}
