"""
Trip preferences - what the traveler asks for.

``TripForm`` is the editable draft behind the preference form; every edit
returns a new form. ``TripPreferences`` is the immutable value produced on
submission and handed to the planner.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any
from enum import Enum

from ..errors import IncompleteFormError


MIN_DURATION = 1
MAX_DURATION = 30


class BudgetTier(str, Enum):
    """Trip budget levels."""
    BUDGET = "budget"
    MEDIUM = "medium"
    LUXURY = "luxury"


class TravelStyle(str, Enum):
    """Who is travelling."""
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY = "family"
    FRIENDS = "friends"
    BALANCED = "balanced"


class Pace(str, Enum):
    """How full each day should be."""
    RELAXED = "relaxed"
    BALANCED = "balanced"
    PACKED = "packed"


INTEREST_OPTIONS = [
    "Nature", "Adventure", "History", "Nightlife",
    "Food", "Shopping", "Art & Culture", "Beach", "Mountains",
]

FOOD_OPTIONS = [
    "Vegetarian", "Vegan", "Non-Veg", "Street Food",
    "Fine Dining", "Local Cuisine",
]

REQUIRED_FIELDS = ["destination", "duration", "budget", "travel_style", "pace"]


def _clean_tags(values: Any, vocabulary: list[str], label: str) -> list[str]:
    """Check tags against a vocabulary, dropping repeats but keeping order."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    cleaned = []
    for tag in values:
        if tag not in vocabulary:
            raise ValueError(f"Unknown {label} '{tag}'. Choose from: {', '.join(vocabulary)}")
        if tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class TripPreferences(BaseModel):
    """Submitted trip preferences. Immutable once built."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    destination: str = Field(..., min_length=1, description="Where to go")
    duration: int = Field(
        ..., ge=MIN_DURATION, le=MAX_DURATION,
        description="Number of days for the trip"
    )
    budget: BudgetTier = Field(..., description="Budget level")
    interests: list[str] = Field(default_factory=list, description="Interest tags")
    travel_style: TravelStyle = Field(..., description="Travel style")
    pace: Pace = Field(..., description="Travel pace")
    food_preferences: list[str] = Field(default_factory=list, description="Food preference tags")

    @field_validator("destination", mode="before")
    @classmethod
    def strip_destination(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("interests", mode="before")
    @classmethod
    def validate_interests(cls, v):
        return _clean_tags(v, INTEREST_OPTIONS, "interest")

    @field_validator("food_preferences", mode="before")
    @classmethod
    def validate_food_preferences(cls, v):
        return _clean_tags(v, FOOD_OPTIONS, "food preference")

    def preference_fields(self) -> dict:
        """The seven preference fields as wire-format values."""
        return self.model_dump(
            by_alias=True, mode="json", include=set(TripPreferences.model_fields)
        )


class TripForm(BaseModel):
    """
    Draft of the preference form.

    Each edit replaces exactly one field and returns a new form; the
    original is left untouched. Nothing here touches the network.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    destination: str = ""
    duration: int = 7
    budget: BudgetTier = BudgetTier.MEDIUM
    interests: list[str] = Field(default_factory=list)
    travel_style: TravelStyle = TravelStyle.BALANCED
    pace: Pace = Pace.BALANCED
    food_preferences: list[str] = Field(default_factory=list)

    @field_validator("duration", mode="before")
    @classmethod
    def clamp_duration(cls, v):
        # Mirrors the min/max bounds of the number input
        if isinstance(v, bool):
            raise ValueError("Duration must be a whole number of days")
        try:
            v = int(v)
        except (TypeError, ValueError):
            raise ValueError("Duration must be a whole number of days")
        return min(max(v, MIN_DURATION), MAX_DURATION)

    @field_validator("interests", mode="before")
    @classmethod
    def validate_interests(cls, v):
        return _clean_tags(v, INTEREST_OPTIONS, "interest")

    @field_validator("food_preferences", mode="before")
    @classmethod
    def validate_food_preferences(cls, v):
        return _clean_tags(v, FOOD_OPTIONS, "food preference")

    @classmethod
    def resolve_field(cls, name: str) -> str:
        """Map a snake_case or camelCase field name to the attribute name."""
        for field_name, field_info in cls.model_fields.items():
            if name in (field_name, field_info.alias):
                return field_name
        raise ValueError(f"Unknown form field '{name}'")

    def set_field(self, name: str, value: Any) -> "TripForm":
        """Replace a single field."""
        field_name = self.resolve_field(name)
        data = self.model_dump()
        data[field_name] = value
        return TripForm(**data)

    def update_fields(self, updates: dict) -> "TripForm":
        """Apply several field replacements in order."""
        form = self
        for name, value in updates.items():
            form = form.set_field(name, value)
        return form

    def _toggle(self, field_name: str, tag: str) -> "TripForm":
        current = list(getattr(self, field_name))
        if tag in current:
            current.remove(tag)
        else:
            current.append(tag)
        return self.set_field(field_name, current)

    def toggle_interest(self, tag: str) -> "TripForm":
        """Select an interest, or deselect it if already selected."""
        return self._toggle("interests", tag)

    def toggle_food_preference(self, tag: str) -> "TripForm":
        """Select a food preference, or deselect it if already selected."""
        return self._toggle("food_preferences", tag)

    def get_missing_fields(self) -> list[str]:
        """Return required fields that are still blank."""
        missing = []
        for field_name in REQUIRED_FIELDS:
            value = getattr(self, field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field_name)
        return missing

    def is_complete(self) -> bool:
        return len(self.get_missing_fields()) == 0

    def submit(self) -> TripPreferences:
        """Freeze the draft into a TripPreferences value."""
        missing = self.get_missing_fields()
        if missing:
            raise IncompleteFormError(missing)
        return TripPreferences(**self.model_dump())

    @classmethod
    def reset(cls) -> "TripForm":
        """A blank form with the default selections."""
        return cls()

    def get_form_summary(self) -> dict:
        """Form values plus completeness, for the API."""
        return {
            "values": self.model_dump(by_alias=True, mode="json"),
            "missing_fields": self.get_missing_fields(),
            "is_complete": self.is_complete(),
        }


def get_form_options() -> dict:
    """Choices offered by the preference form."""
    return {
        "budget": [b.value for b in BudgetTier],
        "travelStyle": [s.value for s in TravelStyle],
        "pace": [p.value for p in Pace],
        "interests": list(INTEREST_OPTIONS),
        "foodPreferences": list(FOOD_OPTIONS),
        "duration": {"min": MIN_DURATION, "max": MAX_DURATION},
    }
