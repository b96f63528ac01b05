"""Shared fixtures for the trip planner tests."""
import pytest

from tripcraft.models.preferences import TripPreferences


KYOTO_REQUEST = {
    "destination": "Kyoto",
    "duration": 3,
    "budget": "medium",
    "interests": ["History", "Food"],
    "travelStyle": "couple",
    "pace": "balanced",
    "foodPreferences": ["Local Cuisine"],
}


def build_slot(name: str) -> dict:
    return {
        "activity": name,
        "description": f"{name} with a local guide.",
        "duration": "2 hours",
        "cost": "¥1,500",
        "tips": "Arrive before 9am.",
    }


def build_day(number: int) -> dict:
    return {
        "day": number,
        "title": f"Day {number} in Kyoto",
        "morning": build_slot(f"Temple visit {number}"),
        "afternoon": build_slot(f"Tea ceremony {number}"),
        "evening": build_slot(f"Gion stroll {number}"),
        "restaurants": [
            {
                "name": f"Izakaya {number}",
                "type": "Japanese",
                "meal": "dinner",
                "description": "Seasonal small plates.",
                "priceRange": "$$",
            }
        ],
        "accommodation": "Ryokan near Higashiyama",
        "transportTips": "Buy a one-day bus pass.",
    }


@pytest.fixture
def kyoto_request() -> dict:
    return dict(KYOTO_REQUEST)


@pytest.fixture
def kyoto_preferences() -> TripPreferences:
    return TripPreferences.model_validate(KYOTO_REQUEST)


@pytest.fixture
def make_days():
    """Factory for well-formed day payloads numbered 1..count."""
    def _make(count: int) -> list[dict]:
        return [build_day(n) for n in range(1, count + 1)]
    return _make
