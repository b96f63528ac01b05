"""
API Routes for the Trip Planner.
"""
from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from typing import Optional

from ..errors import AuthenticationRequiredError
from ..models.preferences import TripPreferences, get_form_options
from ..models.session import Session, SessionStore, get_session_store
from ..services.flow_controller import TripFlow, get_flow_controller
from ..services.planner import ItineraryPlanner, get_planner
from ..services.presenter import render, content_disposition
from ..services.repository import ItineraryRepository, get_repository


router = APIRouter(prefix="/api", tags=["trip-planner"])


# Request Models
class FormUpdateRequest(BaseModel):
    field_updates: dict


class ToggleRequest(BaseModel):
    field: str
    value: str


# Dependencies

def get_current_user(x_user_id: Optional[str] = Header(None)) -> str:
    """The signed-in user's id, as forwarded by the auth provider."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationRequiredError()
    return x_user_id.strip()


def _load_session(session_id: str, store: SessionStore) -> Session:
    session = store.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# Generator

@router.post("/generate-itinerary")
async def generate_itinerary(
    preferences: TripPreferences,
    user_id: str = Depends(get_current_user),
    planner: ItineraryPlanner = Depends(get_planner),
):
    """Generate an itinerary straight from a preferences body."""
    itinerary = await planner.generate(preferences)
    return render(itinerary)


@router.get("/options")
async def get_options():
    """Choices offered by the preference form."""
    return get_form_options()


# Session and preference form

@router.post("/session")
async def create_session(store: SessionStore = Depends(get_session_store)):
    """Create a new planning session with a blank form."""
    session = store.create()
    return session.get_summary()


@router.get("/session/{session_id}")
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _load_session(session_id, store).get_summary()


@router.get("/form/{session_id}")
async def get_form_status(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Get the current form status."""
    session = _load_session(session_id, store)
    return session.form.get_form_summary()


@router.put("/form/{session_id}")
async def update_form(
    session_id: str,
    request: FormUpdateRequest,
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Replace one or more form fields."""
    session = _load_session(session_id, store)
    try:
        flow.update_form(session, request.field_updates)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    store.update(session)
    return session.form.get_form_summary()


@router.post("/form/{session_id}/toggle")
async def toggle_tag(
    session_id: str,
    request: ToggleRequest,
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Select or deselect an interest or food preference."""
    session = _load_session(session_id, store)
    try:
        flow.toggle(session, request.field, request.value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    store.update(session)
    return session.form.get_form_summary()


# Itinerary on display

@router.post("/itinerary/{session_id}/generate")
async def generate_for_session(
    session_id: str,
    user_id: str = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Submit the session's form and generate a fresh itinerary."""
    session = _load_session(session_id, store)
    itinerary = await flow.generate(session)
    store.update(session)
    return render(itinerary)


@router.get("/itinerary/{session_id}")
async def get_itinerary(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Get the itinerary currently on display."""
    session = _load_session(session_id, store)
    return render(flow.current(session))


@router.post("/itinerary/{session_id}/save", status_code=201)
async def save_itinerary(
    session_id: str,
    user_id: str = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Save the current itinerary. Every call inserts a new record."""
    session = _load_session(session_id, store)
    saved = await flow.save(session, user_id)
    return saved.to_display_dict()


@router.get("/itinerary/{session_id}/export")
async def export_itinerary(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Download the current itinerary as a text file."""
    session = _load_session(session_id, store)
    filename, text = flow.export(session)
    return PlainTextResponse(
        text,
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.post("/itinerary/{session_id}/new")
async def new_itinerary(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    flow: TripFlow = Depends(get_flow_controller),
):
    """Discard the current itinerary and reset the form."""
    session = _load_session(session_id, store)
    flow.new(session)
    store.update(session)
    return session.get_summary()


# Saved itineraries

@router.get("/itineraries")
def list_saved_itineraries(
    user_id: str = Depends(get_current_user),
    repository: ItineraryRepository = Depends(get_repository),
):
    saved = repository.list_for_user(user_id)
    return {"itineraries": [s.to_display_dict() for s in saved]}


@router.get("/itineraries/{record_id}")
def get_saved_itinerary(
    record_id: str,
    user_id: str = Depends(get_current_user),
    repository: ItineraryRepository = Depends(get_repository),
):
    saved = repository.get(user_id, record_id)
    if not saved:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return saved.to_display_dict()


@router.delete("/itineraries/{record_id}", status_code=204)
def delete_saved_itinerary(
    record_id: str,
    user_id: str = Depends(get_current_user),
    repository: ItineraryRepository = Depends(get_repository),
):
    if not repository.delete(user_id, record_id):
        raise HTTPException(status_code=404, detail="Itinerary not found")
