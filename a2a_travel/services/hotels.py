"""Hotel search services.

``HotelApiClient`` is the primary (HTTP) source; ``search_hotels`` and
``get_hotel_details`` are the fallback source backed by an in-memory
hotel table.
"""

from __future__ import annotations

import random

import httpx
from pydantic import BaseModel, Field, ValidationError

from a2a_travel.utils.config import ProviderConfig
from a2a_travel.utils.exceptions import ExternalServiceError
from a2a_travel.utils.logging import get_logger

logger = get_logger(__name__)


class HotelSearchError(ExternalServiceError):
    """Raised when the primary hotel source cannot answer a search."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message, service="hotel-api", status_code=status_code, cause=cause
        )


class Hotel(BaseModel):
    """A hotel record."""

    id: str = Field(..., description="Hotel identifier")
    name: str = Field(..., description="Hotel name")
    location: str = Field(..., description="City the hotel is in")
    address: str = Field(default="", description="Street address")
    rating: float = Field(..., ge=0, le=5, description="Guest rating")
    price_per_night: float = Field(..., ge=0, description="Nightly price (USD)")
    amenities: list[str] = Field(default_factory=list, description="Amenities")
    images: list[str] = Field(default_factory=list, description="Image file names")
    available_rooms: int | None = Field(
        default=None, description="Rooms available for the requested stay"
    )


HOTELS: list[Hotel] = [
    Hotel(
        id="h001",
        name="Grand Plaza Hotel",
        location="Tokyo",
        address="1-1-1 Shibuya, Tokyo, Japan",
        rating=4.8,
        price_per_night=250,
        amenities=["WiFi", "Pool", "Spa", "Restaurant", "Gym"],
        images=["grand_plaza_1.jpg", "grand_plaza_2.jpg"],
    ),
    Hotel(
        id="h002",
        name="Ocean View Resort",
        location="Bali",
        address="Jl. Pantai Kuta, Bali, Indonesia",
        rating=4.6,
        price_per_night=180,
        amenities=["WiFi", "Private Beach", "Spa", "Restaurant", "Bar"],
        images=["ocean_view_1.jpg", "ocean_view_2.jpg"],
    ),
    Hotel(
        id="h003",
        name="City Comfort Inn",
        location="Paris",
        address="123 Rue de Rivoli, Paris, France",
        rating=4.2,
        price_per_night=150,
        amenities=["WiFi", "Breakfast", "Restaurant"],
        images=["city_comfort_1.jpg", "city_comfort_2.jpg"],
    ),
    Hotel(
        id="h004",
        name="Mountain Lodge",
        location="Zurich",
        address="Bergstrasse 100, Zurich, Switzerland",
        rating=4.7,
        price_per_night=220,
        amenities=["WiFi", "Sauna", "Ski Storage", "Restaurant"],
        images=["mountain_lodge_1.jpg", "mountain_lodge_2.jpg"],
    ),
    Hotel(
        id="h005",
        name="Desert Oasis Resort",
        location="Dubai",
        address="Palm Jumeirah, Dubai, UAE",
        rating=4.9,
        price_per_night=350,
        amenities=["WiFi", "Pool", "Spa", "Restaurant", "Beach Access", "Gym"],
        images=["desert_oasis_1.jpg", "desert_oasis_2.jpg"],
    ),
]


def _with_availability(hotel: Hotel, *stay: str | None) -> Hotel:
    # 1-5 rooms, stable for a given hotel and stay
    rng = random.Random("|".join([hotel.id, *(s or "" for s in stay)]))
    return hotel.model_copy(update={"available_rooms": rng.randint(1, 5)}, deep=True)


async def search_hotels(
    location: str,
    check_in: str,
    check_out: str,
    guests: int = 2,
    max_price: float | None = None,
) -> list[Hotel]:
    """Search the hotel table.

    Args:
        location: City name (case-insensitive exact match).
        check_in: Check-in date (YYYY-MM-DD).
        check_out: Check-out date (YYYY-MM-DD).
        guests: Number of guests.
        max_price: Optional nightly price ceiling (inclusive).

    Returns:
        Matching hotels with ``available_rooms`` filled in. An empty list
        when nothing matches.
    """
    key = location.strip().lower()
    hotels = [
        _with_availability(hotel, check_in, check_out)
        for hotel in HOTELS
        if hotel.location.lower() == key
        and (not max_price or hotel.price_per_night <= max_price)
    ]
    logger.debug(
        "Hotel table search", location=location, guests=guests, count=len(hotels)
    )
    return hotels


async def get_hotel_details(hotel_id: str) -> Hotel | None:
    """Look up a hotel by id; None if it does not exist."""
    for hotel in HOTELS:
        if hotel.id == hotel_id:
            return _with_availability(hotel)
    return None


class HotelApiClient:
    """Client for the primary (HTTP) hotel-search provider.

    The provider is expected to answer ``GET {base_url}/hotels/search``
    with ``{"hotels": [...]}``.
    """

    SEARCH_PATH = "/hotels/search"

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or ProviderConfig()
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    async def search(
        self,
        location: str,
        check_in: str,
        check_out: str,
        guests: int = 2,
        max_price: float | None = None,
    ) -> list[Hotel]:
        """Search hotels with the primary provider.

        Raises:
            HotelSearchError: If the provider is not configured, the request
                fails, or the response cannot be parsed.
        """
        if not self.enabled:
            raise HotelSearchError("Hotel API is not configured")

        headers = {}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        params: dict[str, str | int | float] = {
            "location": location,
            "check_in": check_in,
            "check_out": check_out,
            "guests": guests,
        }
        if max_price:
            params["max_price"] = max_price

        try:
            async with httpx.AsyncClient(
                base_url=self._config.base_url, transport=self._transport
            ) as client:
                response = await client.get(
                    self.SEARCH_PATH,
                    headers=headers,
                    params=params,
                    timeout=self._config.timeout,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise HotelSearchError(
                f"Hotel API error: {e.response.status_code}",
                status_code=e.response.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise HotelSearchError(f"Hotel API request failed: {e}", cause=e) from e
        except ValueError as e:
            raise HotelSearchError(f"Invalid hotel API response: {e}", cause=e) from e

        try:
            return [Hotel.model_validate(item) for item in data.get("hotels", [])]
        except (AttributeError, ValidationError) as e:
            raise HotelSearchError(f"Invalid hotel API response: {e}", cause=e) from e
