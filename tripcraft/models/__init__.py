"""Data models for the trip planner."""
from .preferences import (
    TripForm,
    TripPreferences,
    BudgetTier,
    TravelStyle,
    Pace,
    INTEREST_OPTIONS,
    FOOD_OPTIONS,
)
from .itinerary import Itinerary, DayPlan, Activity, Restaurant, SavedItinerary
from .session import Session, SessionState, SessionStore

__all__ = [
    "TripForm",
    "TripPreferences",
    "BudgetTier",
    "TravelStyle",
    "Pace",
    "INTEREST_OPTIONS",
    "FOOD_OPTIONS",
    "Itinerary",
    "DayPlan",
    "Activity",
    "Restaurant",
    "SavedItinerary",
    "Session",
    "SessionState",
    "SessionStore",
]
