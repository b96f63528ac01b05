"""
Itinerary models - Structured output for travel plans.

The free-text fields (durations, costs, price ranges, meal slots) are
whatever the AI service returned; only the JSON shape is checked.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime, timezone

from .preferences import TripPreferences


def _as_text(v):
    """Accept numbers and nulls where the AI was asked for text."""
    if v is None:
        return ""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Activity(_WireModel):
    """One time slot of a day."""
    activity: str = Field("", description="Activity name")
    description: str = Field("", description="2-3 sentences about the activity")
    duration: str = Field("", description="Time estimate, free text")
    cost: str = Field("", description="Estimated cost, free text")
    tips: str = Field("", description="Helpful travel tip")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class Restaurant(_WireModel):
    """A place to eat on a given day."""
    name: str = ""
    cuisine: str = Field("", alias="type", description="Cuisine type")
    meal: str = Field("", description="breakfast/lunch/dinner, free text")
    description: str = ""
    price_range: str = Field("", description="e.g. '$$'")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)


class DayPlan(_WireModel):
    """Plan for a single day."""
    day: int = Field(..., ge=1, description="Day number in the trip")
    title: str = Field("", description="Engaging day title")
    morning: Activity
    afternoon: Activity
    evening: Activity
    restaurants: list[Restaurant] = Field(default_factory=list)
    accommodation: Optional[str] = None
    transport_tips: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, v):
        return _as_text(v)

    @field_validator("restaurants", mode="before")
    @classmethod
    def default_restaurants(cls, v):
        return [] if v is None else v

    @field_validator("accommodation", "transport_tips", mode="before")
    @classmethod
    def coerce_optional_text(cls, v):
        if v is None or v == "":
            return None
        return _as_text(v)

    def slots(self) -> list[tuple[str, Activity]]:
        """The three activity slots in display order."""
        return [
            ("Morning", self.morning),
            ("Afternoon", self.afternoon),
            ("Evening", self.evening),
        ]


class Itinerary(TripPreferences):
    """
    A generated multi-day plan together with the preferences that drove it.
    Never edited in place; a new generation replaces it wholesale.
    """
    days: list[DayPlan] = Field(default_factory=list, description="Day-wise plans")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When this itinerary was generated"
    )

    @classmethod
    def from_preferences(
        cls,
        preferences: TripPreferences,
        days: list[DayPlan],
        generated_at: Optional[datetime] = None
    ) -> "Itinerary":
        data = preferences.model_dump(include=set(TripPreferences.model_fields))
        data["days"] = days
        if generated_at is not None:
            data["generated_at"] = generated_at
        return cls(**data)

    def to_display_dict(self) -> dict:
        """Wire-format dictionary (camelCase keys, ISO timestamp)."""
        return self.model_dump(by_alias=True, mode="json")

    def days_as_json(self) -> list[dict]:
        """The day plans alone, in wire format."""
        return [day.model_dump(by_alias=True, mode="json") for day in self.days]


class SavedItinerary(_WireModel):
    """A persisted snapshot of an itinerary."""
    id: str
    user_id: str
    created_at: datetime
    itinerary: Itinerary

    def to_display_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
