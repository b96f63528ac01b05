"""
Session management - Tracks the preference draft and the itinerary on display.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum
import uuid

from .preferences import TripForm
from .itinerary import Itinerary


class SessionState(str, Enum):
    """Which screen the session is on."""
    COLLECTING = "collecting"  # Editing the preference form
    PRESENTING = "presenting"  # Showing a generated itinerary


class Session(BaseModel):
    """One user's planning session."""
    session_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique session identifier"
    )
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    form: TripForm = Field(
        default_factory=TripForm,
        description="The preference form draft"
    )
    itinerary: Optional[Itinerary] = Field(
        None,
        description="The itinerary currently on display"
    )

    # Set while a request is outstanding, so a second click is refused
    generating: bool = False
    saving: bool = False

    @property
    def state(self) -> SessionState:
        return SessionState.PRESENTING if self.itinerary else SessionState.COLLECTING

    def touch(self):
        self.updated_at = datetime.now()

    def update_form(self, updates: dict):
        """Replace form fields."""
        self.form = self.form.update_fields(updates)
        self.touch()

    def toggle(self, field: str, tag: str):
        """Toggle a multi-select tag on the form."""
        field_name = TripForm.resolve_field(field)
        if field_name == "interests":
            self.form = self.form.toggle_interest(tag)
        elif field_name == "food_preferences":
            self.form = self.form.toggle_food_preference(tag)
        else:
            raise ValueError(f"Field '{field}' is not a multi-select field")
        self.touch()

    def show_itinerary(self, itinerary: Itinerary):
        """Replace the itinerary on display."""
        self.itinerary = itinerary
        self.touch()

    def start_over(self):
        """Drop the itinerary and go back to a blank form."""
        self.itinerary = None
        self.form = TripForm.reset()
        self.touch()

    def get_summary(self) -> dict:
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "form": self.form.get_form_summary(),
            "has_itinerary": self.itinerary is not None,
        }


# In-memory session storage
class SessionStore:
    """Simple in-memory session store."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create(self) -> Session:
        """Create a new session."""
        session = Session()
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[Session]:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def update(self, session: Session):
        """Update a session."""
        self._sessions[session.session_id] = session


# Global session store
session_store = SessionStore()


def get_session_store() -> SessionStore:
    return session_store
