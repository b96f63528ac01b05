"""Services for the trip planner."""
from .llm_client import LLMClient
from .planner import ItineraryPlanner
from .repository import ItineraryRepository
from .flow_controller import TripFlow

__all__ = [
    "LLMClient",
    "ItineraryPlanner",
    "ItineraryRepository",
    "TripFlow",
]
