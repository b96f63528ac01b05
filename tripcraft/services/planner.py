"""
Itinerary Planner - the generator.
Turns submitted trip preferences into a day-by-day itinerary via the AI service.
"""
import logging
from typing import Optional
from datetime import datetime, timezone

from .llm_client import LLMClient, get_llm_client
from .parser import parse_itinerary_reply
from ..errors import MalformedReplyError
from ..models.preferences import TripPreferences
from ..models.itinerary import Itinerary, DayPlan

logger = logging.getLogger(__name__)


PLANNER_SYSTEM_PROMPT = (
    "You are an expert travel planner who creates detailed, personalized "
    "itineraries. Always respond with valid JSON only."
)

DAY_SCHEMA = """{
  "day": <number>,
  "title": "<engaging day title>",
  "morning": {
    "activity": "<activity name>",
    "description": "<2-3 sentences about the activity>",
    "duration": "<time estimate>",
    "cost": "<estimated cost in local currency>",
    "tips": "<helpful travel tip>"
  },
  "afternoon": {
    "activity": "<activity name>",
    "description": "<2-3 sentences about the activity>",
    "duration": "<time estimate>",
    "cost": "<estimated cost in local currency>",
    "tips": "<helpful travel tip>"
  },
  "evening": {
    "activity": "<activity name>",
    "description": "<2-3 sentences about the activity>",
    "duration": "<time estimate>",
    "cost": "<estimated cost in local currency>",
    "tips": "<helpful travel tip>"
  },
  "restaurants": [
    {
      "name": "<restaurant name>",
      "type": "<cuisine type>",
      "meal": "<breakfast/lunch/dinner>",
      "description": "<why this restaurant>",
      "priceRange": "<$ to $$$>"
    }
  ],
  "accommodation": "<accommodation suggestion for this day>",
  "transportTips": "<how to get around this day>"
}"""


def _join(values: list[str]) -> str:
    return ", ".join(values) if values else "No preference"


def build_user_prompt(prefs: TripPreferences) -> str:
    """Compose the planning instruction for one set of preferences."""
    interests = _join(prefs.interests)
    food = _join(prefs.food_preferences)
    return f"""You are an expert travel planner. Create a detailed, personalized {prefs.duration}-day itinerary for {prefs.destination}.

Trip Details:
- Budget Level: {prefs.budget.value}
- Interests: {interests}
- Travel Style: {prefs.travel_style.value}
- Pace: {prefs.pace.value}
- Food Preferences: {food}

Generate a day-by-day itinerary with the following structure for each day:
{DAY_SCHEMA}

Important guidelines:
1. Match the pace ({prefs.pace.value}): relaxed = fewer activities, packed = more activities
2. Consider the budget ({prefs.budget.value}): adjust recommendations accordingly
3. Include activities matching interests: {interests}
4. Respect food preferences: {food}
5. Tailor to travel style: {prefs.travel_style.value}
6. Include practical tips, local insights, and hidden gems
7. Provide realistic time estimates and costs
8. Suggest restaurants that match food preferences
9. Return exactly {prefs.duration} day objects, numbered 1 to {prefs.duration}

Return ONLY valid JSON with an array of day objects. No markdown, no explanation."""


class ItineraryPlanner:
    """Generates itineraries. Holds no per-request state."""

    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or get_llm_client()

    def build_messages(self, prefs: TripPreferences) -> list[dict]:
        return [
            {"role": "system", "content": PLANNER_SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(prefs)},
        ]

    async def generate(self, prefs: TripPreferences) -> Itinerary:
        """
        Generate an itinerary for the given preferences.

        Exactly one request goes to the AI service. Upstream and parsing
        failures propagate as ``TripPlannerError`` subclasses.
        """
        logger.info(
            f"Generating itinerary for: destination={prefs.destination}, "
            f"duration={prefs.duration}, budget={prefs.budget.value}"
        )

        content = await self.llm.chat(self.build_messages(prefs))

        try:
            days = parse_itinerary_reply(content)
        except MalformedReplyError as e:
            logger.error(f"Failed to parse AI response ({e.reason}). Raw reply:\n{e.raw_text}")
            raise

        days = self._fit_to_duration(days, prefs.duration)
        return Itinerary.from_preferences(prefs, days, generated_at=datetime.now(timezone.utc))

    def _fit_to_duration(self, days: list[DayPlan], duration: int) -> list[DayPlan]:
        """Order days by index and drop any beyond the requested duration."""
        days = sorted(days, key=lambda d: d.day)
        if len(days) > duration:
            logger.warning(f"AI returned {len(days)} days for a {duration}-day trip; keeping the first {duration}")
            return days[:duration]
        if len(days) < duration:
            logger.warning(f"AI returned only {len(days)} days for a {duration}-day trip")
        return days


# Global planner instance
planner: Optional[ItineraryPlanner] = None


def get_planner() -> ItineraryPlanner:
    """Get or create the global planner."""
    global planner
    if planner is None:
        planner = ItineraryPlanner()
    return planner
