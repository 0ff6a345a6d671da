"""Concrete travel agents.

This module provides the agents that ship with the package:
- TravelSafetyAgent: advisories, sanctions and safer alternatives
- FlightBookingAgent: flight search and route safety
- AccommodationAgent: hotel search and area safety
"""

from .accommodation import AccommodationAgent
from .flights import FlightBookingAgent
from .safety import TravelSafetyAgent

__all__ = [
    "AccommodationAgent",
    "FlightBookingAgent",
    "TravelSafetyAgent",
]
