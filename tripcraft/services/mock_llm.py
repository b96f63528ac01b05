"""
Mock LLM Client - Offline stand-in for the AI gateway.
Answers itinerary prompts with a deterministic, fenced JSON day list so the
whole pipeline can run without an API key.
"""
import re
import json
import logging
from typing import Optional

logger = logging.getLogger(__name__)

SLOT_IDEAS = {
    "morning": ("Old Town Walk", "2-3 hours", "Free"),
    "afternoon": ("Local Market Visit", "2 hours", "$10-20"),
    "evening": ("Sunset Viewpoint", "1-2 hours", "Free"),
}


class MockLLMClient:
    """Deterministic mock that reads the trip details back out of the prompt."""

    def __init__(self):
        self.model = "mock-demo"

    async def chat(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        user_msg = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        duration, destination = self._read_trip(user_msg)
        interests = self._read_line(user_msg, "Interests")
        if interests == "No preference":
            interests = ""
        logger.debug(f"Mock itinerary for {destination} ({duration} days)")

        days = [self._build_day(n, destination, interests) for n in range(1, duration + 1)]
        return "```json\n" + json.dumps(days, indent=2, ensure_ascii=False) + "\n```"

    def _read_trip(self, prompt: str) -> tuple[int, str]:
        match = re.search(r"(\d+)-day itinerary for (.+?)\.\n", prompt)
        if not match:
            return 1, "your destination"
        return int(match.group(1)), match.group(2).strip()

    def _read_line(self, prompt: str, label: str) -> str:
        match = re.search(rf"- {label}: (.*)", prompt)
        return match.group(1).strip() if match else ""

    def _build_day(self, number: int, destination: str, interests: str) -> dict:
        focus = interests.split(", ")[(number - 1) % len(interests.split(", "))] if interests else "Highlights"
        day = {
            "day": number,
            "title": f"{destination} {focus} Day {number}",
            "restaurants": [
                {
                    "name": f"{destination} Kitchen",
                    "type": "Local",
                    "meal": "lunch",
                    "description": "Popular with locals for regional dishes.",
                    "priceRange": "$$",
                }
            ],
            "accommodation": f"Central guesthouse in {destination}",
            "transportTips": "Walk between nearby sights and use public transit for longer hops.",
        }
        for slot, (name, duration, cost) in SLOT_IDEAS.items():
            day[slot] = {
                "activity": f"{name} ({focus})",
                "description": f"Explore {destination} with a focus on {focus.lower()}.",
                "duration": duration,
                "cost": cost,
                "tips": "Go early to avoid the crowds.",
            }
        return day
