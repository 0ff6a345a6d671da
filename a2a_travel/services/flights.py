"""Flight search services.

This module provides the two flight data sources used by the flight
booking agent:

- ``FlightApiClient``: the primary source, an HTTP flight-search API
  reached through httpx. Disabled unless a base URL is configured.
- ``search_flights``: the fallback source, a simulated search that
  generates a plausible flight list. Results are seeded from the route
  and dates so the same search always yields the same flights.

Pricing trends and recommendation helpers are built on the simulated
source.
"""

from __future__ import annotations

import random
from datetime import date
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from a2a_travel.utils.config import ProviderConfig
from a2a_travel.utils.exceptions import ExternalServiceError
from a2a_travel.utils.logging import get_logger

logger = get_logger(__name__)


class FlightSearchError(ExternalServiceError):
    """Raised when the primary flight source cannot answer a search."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message, service="flight-api", status_code=status_code, cause=cause
        )


class FlightSearch(BaseModel):
    """Flight search criteria."""

    departure_city: str = Field(..., description="City of departure")
    arrival_city: str = Field(..., description="City of arrival")
    departure_date: str = Field(..., description="Departure date (YYYY-MM-DD)")
    return_date: str | None = Field(
        default=None, description="Return date for round trips (YYYY-MM-DD)"
    )
    adults: int = Field(default=1, ge=1, description="Adult passengers")

    model_config = {"extra": "forbid"}

    @property
    def is_round_trip(self) -> bool:
        return self.return_date is not None


class ReturnFlight(BaseModel):
    """Return leg of a round-trip offer."""

    departure_time: str
    arrival_time: str
    duration: str


class Flight(BaseModel):
    """A flight offer."""

    id: str = Field(..., description="Offer identifier")
    airline: str = Field(..., description="Airline name")
    flight_number: str = Field(default="", description="Carrier flight number")
    departure_airport: str = Field(default="", description="Departure airport")
    departure_city: str = Field(default="", description="Departure city")
    departure_time: str = Field(..., description="Local departure time (HH:MM)")
    arrival_airport: str = Field(default="", description="Arrival airport")
    arrival_city: str = Field(default="", description="Arrival city")
    arrival_time: str = Field(..., description="Local arrival time (HH:MM)")
    duration: str = Field(..., description="Flight duration, e.g. '7h 30m'")
    stops: int = Field(default=0, ge=0, description="Number of stops")
    price: float = Field(..., ge=0, description="Total price")
    currency: str = Field(default="USD", description="Price currency")
    return_flight: ReturnFlight | None = Field(
        default=None, description="Return leg for round trips"
    )


AIRPORT_CODES: dict[str, str] = {
    "Tokyo": "NRT",
    "Paris": "CDG",
    "London": "LHR",
    "New York": "JFK",
    "Los Angeles": "LAX",
    "San Francisco": "SFO",
    "Chicago": "ORD",
    "Miami": "MIA",
    "Dubai": "DXB",
    "Singapore": "SIN",
    "Hong Kong": "HKG",
    "Sydney": "SYD",
    "Mumbai": "BOM",
    "Bangkok": "BKK",
}

AIRLINES: list[str] = [
    "American Airlines",
    "United",
    "Delta",
    "British Airways",
    "Lufthansa",
    "Emirates",
    "Singapore Airlines",
    "Qatar Airways",
    "Air France",
    "KLM",
    "Japan Airlines",
    "Cathay Pacific",
]

MONTHS: list[str] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Seasonal demand for flights, by month
SEASONAL_FACTORS: dict[str, float] = {
    "January": 0.75,
    "February": 0.7,
    "March": 0.85,
    "April": 0.9,
    "May": 0.8,
    "June": 1.1,
    "July": 1.3,
    "August": 1.25,
    "September": 0.85,
    "October": 0.8,
    "November": 0.85,
    "December": 1.2,
}

ADVANCE_BOOKING_TREND: list[dict[str, Any]] = [
    {"days_before_departure": "1-7", "price_multiplier": 1.4},
    {"days_before_departure": "8-14", "price_multiplier": 1.2},
    {"days_before_departure": "15-30", "price_multiplier": 1.0},
    {"days_before_departure": "31-60", "price_multiplier": 0.9},
    {"days_before_departure": "61-90", "price_multiplier": 0.85},
    {"days_before_departure": "91+", "price_multiplier": 0.8},
]

ROUND_TRIP_FACTOR = 1.8

_AMERICAS = ("america", "usa", "united states", "canada", "new york", "chicago",
             "los angeles", "san francisco", "miami")
_EUROPE = ("europe", "uk", "london", "france", "paris", "germany", "zurich")
_ASIA_PACIFIC = ("asia", "japan", "tokyo", "china", "hong kong", "singapore",
                 "australia", "sydney", "bangkok", "mumbai")


def get_airport_code(location: str) -> str:
    """Map a city to its main airport code.

    Unknown cities fall back to the first three letters, uppercased.
    """
    return AIRPORT_CODES.get(location, location[:3].upper())


def _rng(*parts: Any) -> random.Random:
    return random.Random("|".join(str(p).lower() for p in parts))


def _matches(location: str, keywords: tuple[str, ...]) -> bool:
    lowered = location.lower()
    return any(keyword in lowered for keyword in keywords)


def _distance_multiplier(origin: str, destination: str, rng: random.Random) -> float:
    """Rough price multiplier (hundreds of USD) for a route."""
    if _matches(origin, _AMERICAS) and _matches(destination, _AMERICAS):
        return 2 + rng.random() * 3
    if (_matches(origin, _AMERICAS) and _matches(destination, _EUROPE)) or (
        _matches(origin, _EUROPE) and _matches(destination, _AMERICAS)
    ):
        return 6 + rng.random() * 4
    if (_matches(origin, _AMERICAS) and _matches(destination, _ASIA_PACIFIC)) or (
        _matches(origin, _ASIA_PACIFIC) and _matches(destination, _AMERICAS)
    ):
        return 8 + rng.random() * 6
    return 5 + rng.random() * 7


def _clock(hour: int, minute: int) -> str:
    return f"{hour % 24:02d}:{minute % 60:02d}"


def _arrival(dep_hour: int, dep_minute: int, dur_hours: int, dur_minutes: int) -> str:
    total = dep_minute + dur_minutes
    return _clock(dep_hour + dur_hours + total // 60, total % 60)


def simulate_flights(search: FlightSearch) -> list[Flight]:
    """Generate a deterministic list of flight offers for a search.

    Between 5 and 12 offers are generated, sorted by price (lowest first).
    Round trips cost 1.8x the one-way fare and carry a return leg.

    Args:
        search: The search criteria.

    Returns:
        List of flight offers.
    """
    rng = _rng(
        search.departure_city,
        search.arrival_city,
        search.departure_date,
        search.return_date,
        search.adults,
    )
    multiplier = _distance_multiplier(search.departure_city, search.arrival_city, rng)
    origin_code = get_airport_code(search.departure_city)
    destination_code = get_airport_code(search.arrival_city)

    flights: list[Flight] = []
    for _ in range(rng.randint(5, 12)):
        airline_index = rng.randrange(len(AIRLINES))
        airline = AIRLINES[airline_index]
        # 60% of offers are direct
        stops = rng.randint(1, 2) if rng.random() > 0.6 else 0

        dep_hour = 6 + rng.randrange(16)
        dep_minute = rng.randrange(4) * 15
        dur_hours = max(2, min(15, int(multiplier)))
        dur_minutes = rng.randrange(60)
        duration = f"{dur_hours}h {dur_minutes}m"

        quality = 0.8 + (airline_index / len(AIRLINES)) * 0.4
        stops_factor = 1 - stops * 0.15
        variation = 0.85 + rng.random() * 0.3
        price = round(multiplier * 100 * quality * stops_factor * variation) * search.adults

        return_flight = None
        if search.is_round_trip:
            price = round(price * ROUND_TRIP_FACTOR)
            ret_hour = 6 + rng.randrange(16)
            ret_minute = rng.randrange(4) * 15
            return_flight = ReturnFlight(
                departure_time=_clock(ret_hour, ret_minute),
                arrival_time=_arrival(ret_hour, ret_minute, dur_hours, dur_minutes),
                duration=duration,
            )

        code = airline[:2].upper()
        number = rng.randint(100, 9999)
        flights.append(
            Flight(
                id=f"FL{rng.randint(100000, 999999)}",
                airline=airline,
                flight_number=f"{code} {number}",
                departure_airport=origin_code,
                departure_city=search.departure_city,
                departure_time=_clock(dep_hour, dep_minute),
                arrival_airport=destination_code,
                arrival_city=search.arrival_city,
                arrival_time=_arrival(dep_hour, dep_minute, dur_hours, dur_minutes),
                duration=duration,
                stops=stops,
                price=price,
                return_flight=return_flight,
            )
        )

    return sorted(flights, key=lambda f: f.price)


async def search_flights(search: FlightSearch) -> list[Flight]:
    """Fallback flight search backed by the simulated generator."""
    flights = simulate_flights(search)
    logger.debug(
        "Simulated flight search",
        departure_city=search.departure_city,
        arrival_city=search.arrival_city,
        count=len(flights),
    )
    return flights


def group_flights_by_airline(flights: list[Flight]) -> dict[str, list[Flight]]:
    """Group offers by airline, preserving first-seen order."""
    grouped: dict[str, list[Flight]] = {}
    for flight in flights:
        grouped.setdefault(flight.airline, []).append(flight)
    return grouped


def get_cheapest_flights_by_airline(flights: list[Flight]) -> list[Flight]:
    """The cheapest offer of each airline."""
    return [
        min(airline_flights, key=lambda f: f.price)
        for airline_flights in group_flights_by_airline(flights).values()
    ]


async def get_flight_recommendations(
    destination: str,
    departure_city: str = "New York",
    departure_date: str | None = None,
) -> dict[str, list[Flight]]:
    """Recommended flights to a destination.

    Args:
        destination: Arrival city.
        departure_city: City of departure.
        departure_date: Departure date; defaults to today.

    Returns:
        ``{"all": [...], "cheapest_by_airline": [...]}``
    """
    flights = await search_flights(
        FlightSearch(
            departure_city=departure_city,
            arrival_city=destination,
            departure_date=departure_date or date.today().isoformat(),
        )
    )
    return {
        "all": flights,
        "cheapest_by_airline": get_cheapest_flights_by_airline(flights),
    }


def get_flight_pricing_trends(origin: str, destination: str) -> dict[str, Any]:
    """Simulated pricing trends for a route.

    Returns monthly average prices, the advance-booking price curve,
    per-airline averages and the three cheapest months to travel.
    """
    rng = _rng("trends", origin, destination)
    multiplier = _distance_multiplier(origin, destination, rng)

    monthly_prices = []
    for month in MONTHS:
        factor = SEASONAL_FACTORS[month] * (0.9 + rng.random() * 0.2)
        availability = round(90 - factor * 30)
        monthly_prices.append(
            {
                "month": month,
                "avg_price": round(multiplier * 100 * factor),
                "occupancy_rate": 100 - availability,
            }
        )

    airlines = AIRLINES[: 4 + rng.randrange(4)]
    airline_prices = sorted(
        (
            {
                "airline": airline,
                "avg_price": round(multiplier * 100 * (0.9 + rng.random() * 0.3)),
                "rating": round(3 + rng.random() * 2, 1),
            }
            for airline in airlines
        ),
        key=lambda entry: entry["avg_price"],
    )

    cheapest = sorted(monthly_prices, key=lambda entry: entry["avg_price"])[:3]
    return {
        "route": f"{origin} to {destination}",
        "base_price": round(multiplier * 100),
        "monthly_prices": monthly_prices,
        "advance_booking_trend": [dict(entry) for entry in ADVANCE_BOOKING_TREND],
        "airlines": airline_prices,
        "best_time_to_book": [entry["month"] for entry in cheapest],
    }


class FlightApiClient:
    """Client for the primary (HTTP) flight-search provider.

    The provider is expected to answer ``POST {base_url}/flights/search``
    with ``{"flights": [...]}``.
    """

    SEARCH_PATH = "/flights/search"

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Provider settings. An empty base URL disables the client.
            transport: Optional httpx transport (used to mock the provider).
        """
        self._config = config or ProviderConfig()
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    async def search(self, search: FlightSearch) -> list[Flight]:
        """Search flights with the primary provider.

        Raises:
            FlightSearchError: If the provider is not configured, the request
                fails, or the response cannot be parsed.
        """
        if not self.enabled:
            raise FlightSearchError("Flight API is not configured")

        headers = {}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        payload = {
            "origin": get_airport_code(search.departure_city),
            "destination": get_airport_code(search.arrival_city),
            "departure_date": search.departure_date,
            "return_date": search.return_date,
            "adults": search.adults,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self._config.base_url, transport=self._transport
            ) as client:
                response = await client.post(
                    self.SEARCH_PATH,
                    headers=headers,
                    json=payload,
                    timeout=self._config.timeout,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise FlightSearchError(
                f"Flight API error: {e.response.status_code}",
                status_code=e.response.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise FlightSearchError(f"Flight API request failed: {e}", cause=e) from e
        except ValueError as e:
            raise FlightSearchError(f"Invalid flight API response: {e}", cause=e) from e

        try:
            return [Flight.model_validate(item) for item in data.get("flights", [])]
        except (AttributeError, ValidationError) as e:
            raise FlightSearchError(
                f"Invalid flight API response: {e}", cause=e
            ) from e
