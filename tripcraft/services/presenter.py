"""
Itinerary Presenter - rendering and the plain-text export.
"""
import re
from urllib.parse import quote

from ..models.itinerary import Itinerary


def render(itinerary: Itinerary) -> dict:
    """The itinerary as the client displays it."""
    return itinerary.to_display_dict()


def export_as_text(itinerary: Itinerary) -> str:
    """Format the whole itinerary as flat, human-readable text."""
    lines = [
        f"Trip to {itinerary.destination} ({itinerary.duration} days)",
        "",
        f"Budget: {itinerary.budget.value}",
        f"Style: {itinerary.travel_style.value}",
        f"Pace: {itinerary.pace.value}",
        f"Interests: {', '.join(itinerary.interests)}",
        f"Food Preferences: {', '.join(itinerary.food_preferences)}",
        f"Generated: {itinerary.generated_at.isoformat()}",
        "",
    ]

    for day in itinerary.days:
        lines.append(f"Day {day.day}: {day.title}")
        for label, slot in day.slots():
            lines.append(f"  {label}: {slot.activity} ({slot.duration}, {slot.cost}) - {slot.description}")
            if slot.tips:
                lines.append(f"    Tip: {slot.tips}")

        if day.restaurants:
            lines.append("  🍴 Restaurants:")
            for r in day.restaurants:
                lines.append(f"    - {r.name} ({r.meal}, {r.cuisine}, {r.price_range}): {r.description}")

        if day.transport_tips:
            lines.append(f"  🚗 Transport Tips: {day.transport_tips}")
        if day.accommodation:
            lines.append(f"  🏨 Stay: {day.accommodation}")
        lines.append("")

    return "\n".join(lines)


def export_filename(itinerary: Itinerary) -> str:
    """Download name for the text export, e.g. 'trip-itinerary-Kyoto.txt'."""
    safe = re.sub(r'[\\/:*?"<>|\r\n]+', "-", itinerary.destination).strip(" .-") or "trip"
    return f"trip-itinerary-{safe}.txt"


def content_disposition(filename: str) -> str:
    """Attachment header value that survives non-ASCII destinations."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii") or "trip-itinerary.txt"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
