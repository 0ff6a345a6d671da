"""External data sources used by the travel agents.

- safety: in-memory travel advisory table
- flights: primary flight API client and simulated fallback search
- hotels: primary hotel API client and in-memory fallback table
"""

from .flights import (
    Flight,
    FlightApiClient,
    FlightSearch,
    FlightSearchError,
    get_airport_code,
    get_cheapest_flights_by_airline,
    get_flight_pricing_trends,
    get_flight_recommendations,
    search_flights,
    simulate_flights,
)
from .hotels import (
    HOTELS,
    Hotel,
    HotelApiClient,
    HotelSearchError,
    get_hotel_details,
    search_hotels,
)
from .safety import (
    REGION_ALTERNATIVES,
    RegionAdvisory,
    SafetyAdvisory,
    SafetyCheck,
    SafetyLevel,
    check_destination_safety,
    get_countries_by_level,
    get_high_risk_destinations,
    get_safety_info,
    has_sanctions,
    suggest_safe_alternatives,
)

__all__ = [
    # Safety
    "SafetyLevel",
    "SafetyAdvisory",
    "RegionAdvisory",
    "SafetyCheck",
    "REGION_ALTERNATIVES",
    "get_safety_info",
    "has_sanctions",
    "get_countries_by_level",
    "get_high_risk_destinations",
    "check_destination_safety",
    "suggest_safe_alternatives",
    # Flights
    "Flight",
    "FlightSearch",
    "FlightSearchError",
    "FlightApiClient",
    "get_airport_code",
    "simulate_flights",
    "search_flights",
    "get_flight_recommendations",
    "get_cheapest_flights_by_airline",
    "get_flight_pricing_trends",
    # Hotels
    "Hotel",
    "HOTELS",
    "HotelSearchError",
    "HotelApiClient",
    "search_hotels",
    "get_hotel_details",
]
