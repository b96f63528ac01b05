"""
Flow Controller - Backend flow management for one planning session.
Collector edits, generation, and the presenter actions (save, export, new).
"""
import logging
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from .planner import ItineraryPlanner, get_planner
from .presenter import export_as_text, export_filename
from .repository import ItineraryRepository, get_repository
from ..errors import ItineraryNotFoundError, RequestInProgressError
from ..models.session import Session
from ..models.itinerary import Itinerary, SavedItinerary

logger = logging.getLogger(__name__)


class TripFlow:
    """
    Controls a session's flow.

    The session carries the only state; this class can be shared between
    sessions. The ``generating`` and ``saving`` flags refuse a second click
    while the first request is still outstanding.
    """

    def __init__(
        self,
        planner: Optional[ItineraryPlanner] = None,
        repository: Optional[ItineraryRepository] = None
    ):
        self.planner = planner or get_planner()
        self.repository = repository or get_repository()

    def update_form(self, session: Session, updates: dict):
        session.update_form(updates)

    def toggle(self, session: Session, field: str, value: str):
        session.toggle(field, value)

    async def generate(self, session: Session) -> Itinerary:
        """Submit the form and replace the session's itinerary with a new one."""
        if session.generating:
            raise RequestInProgressError()

        prefs = session.form.submit()
        session.generating = True
        try:
            itinerary = await self.planner.generate(prefs)
        finally:
            session.generating = False

        session.show_itinerary(itinerary)
        return itinerary

    async def save(self, session: Session, user_id: str) -> SavedItinerary:
        """Persist the current itinerary as a new record."""
        itinerary = self.current(session)
        if session.saving:
            raise RequestInProgressError()

        session.saving = True
        try:
            return await run_in_threadpool(self.repository.save, user_id, itinerary)
        finally:
            session.saving = False

    def export(self, session: Session) -> Tuple[str, str]:
        """Return (filename, text) for the current itinerary."""
        itinerary = self.current(session)
        return export_filename(itinerary), export_as_text(itinerary)

    def new(self, session: Session):
        """Discard the itinerary and start again from a blank form."""
        # A pending generation would repopulate the reset session
        if session.generating:
            raise RequestInProgressError()
        session.start_over()
        logger.debug(f"Session {session.session_id} started a new trip")

    def current(self, session: Session) -> Itinerary:
        if session.itinerary is None:
            raise ItineraryNotFoundError()
        return session.itinerary


# Global flow controller instance
flow_controller: Optional[TripFlow] = None


def get_flow_controller() -> TripFlow:
    """Get or create the global flow controller."""
    global flow_controller
    if flow_controller is None:
        flow_controller = TripFlow()
    return flow_controller
