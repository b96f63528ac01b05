"""
Error taxonomy for the trip planner.

Every failure a user can trigger maps to one of these classes. Each carries
the HTTP status the API answers with and the short message shown to the
user; the exception handler in ``tripcraft.main`` renders them as
``{"error": message}``.
"""
from typing import Optional


class TripPlannerError(Exception):
    """Base class for all user-facing failures."""
    status_code: int = 500
    message: str = "Unknown error occurred"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class AuthenticationRequiredError(TripPlannerError):
    status_code = 401
    message = "Please sign in to continue"


class IncompleteFormError(TripPlannerError):
    status_code = 400
    message = "Trip preferences are incomplete"

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Missing required fields: {', '.join(missing_fields)}")


class RateLimitedError(TripPlannerError):
    """Upstream AI service throttled the request (HTTP 429)."""
    status_code = 429
    message = "Too many requests. Please try again later."


class CreditsExhaustedError(TripPlannerError):
    """Upstream AI service reported payment required (HTTP 402)."""
    status_code = 402
    message = "AI service credits depleted. Please contact support."


class GenerationFailedError(TripPlannerError):
    """Any other upstream failure."""
    status_code = 500
    message = "Failed to generate itinerary"


class MalformedReplyError(TripPlannerError):
    """
    The AI reply could not be parsed into day plans.

    ``raw_text`` holds the offending reply for diagnostic logging. It is
    never part of the user-facing message.
    """
    status_code = 500
    message = "Failed to parse itinerary data"

    def __init__(self, raw_text: str, reason: str = ""):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__()


class PersistenceError(TripPlannerError):
    status_code = 500
    message = "Failed to save itinerary"


class ItineraryNotFoundError(TripPlannerError):
    status_code = 404
    message = "No itinerary generated yet"


class RequestInProgressError(TripPlannerError):
    """A generate or save for the same session is still running."""
    status_code = 409
    message = "A request is already in progress. Please wait."
