"""
Reply parser - turns the AI service's text reply into day plans.

The reply is untrusted text. It is only ever handed to ``json.loads``;
anything that does not come out as a list of day objects is rejected with
``MalformedReplyError``.
"""
import json
import re

from pydantic import TypeAdapter, ValidationError

from ..errors import MalformedReplyError
from ..models.itinerary import DayPlan


FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
STRAY_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

_day_list = TypeAdapter(list[DayPlan])
_decoder = json.JSONDecoder()


def strip_code_fences(text: str) -> str:
    """Return the body of a ```json fenced block, or the text minus stray fences."""
    text = text.strip()
    match = FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    return STRAY_FENCE.sub("", text).strip()


def _looks_like_days(value) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(v, dict) for v in value)


def _load_json(text: str):
    """
    Decode the reply, or the first array of objects embedded in prose.

    Only ``JSONDecodeError`` moves the search on; recursion and number-size
    limits propagate to the caller.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    first = None
    start = text.find("[")
    while start != -1:
        try:
            value, end = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("[", start + 1)
            continue
        if _looks_like_days(value):
            return value
        if first is None:
            first = value
        start = text.find("[", end)

    if first is not None:
        return first
    raise json.JSONDecodeError("No JSON array found", text, 0)


def _unwrap_days(data):
    """Accept a bare array, or an object holding it under 'days'/'itinerary'."""
    if isinstance(data, dict):
        for key in ("days", "itinerary"):
            if isinstance(data.get(key), list):
                return data[key]
    return data


def parse_itinerary_reply(raw_text: str) -> list[DayPlan]:
    """
    Parse an AI reply into day plans.

    Raises:
        MalformedReplyError: the reply is not a JSON array of day objects
    """
    if not raw_text or not raw_text.strip():
        raise MalformedReplyError(raw_text or "", "empty reply")

    try:
        data = _load_json(strip_code_fences(raw_text))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; so are oversized integer literals
        raise MalformedReplyError(raw_text, f"invalid JSON: {e}") from e

    days = _unwrap_days(data)
    if not isinstance(days, list):
        raise MalformedReplyError(raw_text, f"expected a list of days, got {type(days).__name__}")

    items = []
    for position, item in enumerate(days, start=1):
        if not isinstance(item, dict):
            raise MalformedReplyError(raw_text, f"day {position} is not an object")
        if item.get("day") is None:
            item = {**item, "day": position}
        items.append(item)

    try:
        return _day_list.validate_python(items)
    except ValidationError as e:
        raise MalformedReplyError(raw_text, str(e)) from e
