"""Tests for the HTTP API."""
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from tripcraft.main import app
from tripcraft.services.flow_controller import TripFlow, get_flow_controller
from tripcraft.services.llm_client import LLMClient
from tripcraft.services.planner import ItineraryPlanner, get_planner
from tripcraft.services.repository import ItineraryRepository, get_repository


USER = {"X-User-Id": "user-1"}


def _completion(content: str):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _status_error(cls, status: int):
    request = httpx.Request("POST", "https://ai.gateway.example/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return cls(f"Error code: {status}", response=response, body=None)


@pytest.fixture
def upstream(make_days):
    """The OpenAI-compatible endpoint, faked at the SDK client."""
    fake = MagicMock()
    fake.chat.completions.create = AsyncMock(
        return_value=_completion("```json\n" + json.dumps(make_days(3)) + "\n```")
    )
    return fake.chat.completions.create, fake


@pytest.fixture
def client(upstream, tmp_path):
    create, fake = upstream
    llm = LLMClient(
        config={"provider": "lovable", "model": "test-model", "temperature": 0.8},
        client=fake,
    )
    planner = ItineraryPlanner(llm=llm)
    repository = ItineraryRepository(str(tmp_path / "api.db"))
    flow = TripFlow(planner=planner, repository=repository)

    app.dependency_overrides[get_planner] = lambda: planner
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_flow_controller] = lambda: flow
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestGenerateEndpoint:
    """POST /api/generate-itinerary"""

    def test_requires_sign_in(self, client, upstream, kyoto_request):
        response = client.post("/api/generate-itinerary", json=kyoto_request)

        assert response.status_code == 401
        assert response.json() == {"error": "Please sign in to continue"}
        upstream[0].assert_not_awaited()

    def test_kyoto(self, client, upstream, kyoto_request):
        response = client.post("/api/generate-itinerary", json=kyoto_request, headers=USER)

        assert response.status_code == 200
        data = response.json()
        assert len(data["days"]) == 3
        assert data["days"][0]["day"] == 1
        for key, value in kyoto_request.items():
            assert data[key] == value
        assert "generatedAt" in data

        create = upstream[0]
        create.assert_awaited_once()
        prompt = create.await_args.kwargs["messages"][1]["content"]
        for fragment in ("Kyoto", "3-day", "medium", "History, Food", "couple", "balanced", "Local Cuisine"):
            assert fragment in prompt

    def test_rate_limited(self, client, upstream, kyoto_request):
        upstream[0].side_effect = _status_error(openai.RateLimitError, 429)

        response = client.post("/api/generate-itinerary", json=kyoto_request, headers=USER)

        assert response.status_code == 429
        assert response.json() == {"error": "Too many requests. Please try again later."}
        assert upstream[0].await_count == 1

    def test_payment_required(self, client, upstream, kyoto_request):
        upstream[0].side_effect = _status_error(openai.APIStatusError, 402)

        response = client.post("/api/generate-itinerary", json=kyoto_request, headers=USER)

        assert response.status_code == 402
        assert response.json() == {"error": "AI service credits depleted. Please contact support."}

    def test_upstream_failure(self, client, upstream, kyoto_request):
        upstream[0].side_effect = _status_error(openai.InternalServerError, 500)

        response = client.post("/api/generate-itinerary", json=kyoto_request, headers=USER)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate itinerary"}

    def test_malformed_reply(self, client, upstream, kyoto_request):
        raw = "Day 1: temples. Day 2: more temples."
        upstream[0].return_value = _completion(raw)

        response = client.post("/api/generate-itinerary", json=kyoto_request, headers=USER)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse itinerary data"}
        assert raw not in response.text

    def test_deeply_nested_reply(self, client, upstream, kyoto_request):
        upstream[0].return_value = _completion("[" * 100000)

        response = client.post("/api/generate-itinerary", json=kyoto_request, headers=USER)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse itinerary data"}

    def test_invalid_preferences(self, client, upstream, kyoto_request):
        for bad in ({"duration": 45}, {"budget": "cheap"}, {"destination": ""}):
            response = client.post(
                "/api/generate-itinerary", json={**kyoto_request, **bad}, headers=USER
            )
            assert response.status_code == 422
        upstream[0].assert_not_awaited()


class TestSessionFlow:
    """Collector, generator and presenter through one session."""

    def _session(self, client) -> str:
        response = client.post("/api/session")
        assert response.status_code == 200
        return response.json()["session_id"]

    def _fill_form(self, client, session_id: str):
        response = client.put(f"/api/form/{session_id}", json={"field_updates": {
            "destination": "Kyoto", "duration": 3, "travelStyle": "couple",
        }})
        assert response.status_code == 200
        for field, value in [("interests", "History"), ("interests", "Food"),
                             ("foodPreferences", "Local Cuisine")]:
            response = client.post(f"/api/form/{session_id}/toggle", json={"field": field, "value": value})
            assert response.status_code == 200
        return response.json()

    def test_full_flow(self, client, kyoto_request):
        session_id = self._session(client)

        form = self._fill_form(client, session_id)
        assert form["is_complete"] is True
        assert form["values"] == kyoto_request

        response = client.post(f"/api/itinerary/{session_id}/generate", headers=USER)
        assert response.status_code == 200
        assert len(response.json()["days"]) == 3

        shown = client.get(f"/api/itinerary/{session_id}")
        assert shown.json() == response.json()

        export = client.get(f"/api/itinerary/{session_id}/export")
        assert export.status_code == 200
        assert export.headers["content-type"].startswith("text/plain")
        assert "trip-itinerary-Kyoto.txt" in export.headers["content-disposition"]
        assert export.text.startswith("Trip to Kyoto (3 days)")

        first = client.post(f"/api/itinerary/{session_id}/save", headers=USER)
        second = client.post(f"/api/itinerary/{session_id}/save", headers=USER)
        assert first.status_code == 201
        assert first.json()["id"] != second.json()["id"]
        assert first.json()["userId"] == "user-1"

        saved = client.get("/api/itineraries", headers=USER).json()["itineraries"]
        assert len(saved) == 2
        assert saved[0]["itinerary"]["destination"] == "Kyoto"

        reset = client.post(f"/api/itinerary/{session_id}/new")
        assert reset.json()["has_itinerary"] is False
        assert reset.json()["form"]["values"]["destination"] == ""
        assert client.get(f"/api/itinerary/{session_id}").status_code == 404

    def test_toggle_twice_restores(self, client):
        session_id = self._session(client)
        url = f"/api/form/{session_id}/toggle"

        client.post(url, json={"field": "interests", "value": "Beach"})
        client.post(url, json={"field": "interests", "value": "Nature"})
        client.post(url, json={"field": "interests", "value": "Beach"})
        response = client.post(url, json={"field": "interests", "value": "Beach"})

        assert response.json()["values"]["interests"] == ["Nature", "Beach"]

    def test_duration_clamped(self, client):
        session_id = self._session(client)

        response = client.put(f"/api/form/{session_id}", json={"field_updates": {"duration": 99}})

        assert response.json()["values"]["duration"] == 30

    def test_bad_form_edit(self, client):
        session_id = self._session(client)

        assert client.put(
            f"/api/form/{session_id}", json={"field_updates": {"pace": "frantic"}}
        ).status_code == 400
        assert client.post(
            f"/api/form/{session_id}/toggle", json={"field": "interests", "value": "Skiing"}
        ).status_code == 400

    def test_generate_requires_sign_in(self, client):
        session_id = self._session(client)
        self._fill_form(client, session_id)

        response = client.post(f"/api/itinerary/{session_id}/generate")

        assert response.status_code == 401

    def test_generate_incomplete_form(self, client, upstream):
        session_id = self._session(client)

        response = client.post(f"/api/itinerary/{session_id}/generate", headers=USER)

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: destination"}
        upstream[0].assert_not_awaited()

    def test_save_requires_sign_in(self, client):
        session_id = self._session(client)
        self._fill_form(client, session_id)
        client.post(f"/api/itinerary/{session_id}/generate", headers=USER)

        response = client.post(f"/api/itinerary/{session_id}/save")

        assert response.status_code == 401

    def test_actions_without_itinerary(self, client):
        session_id = self._session(client)

        for response in (
            client.get(f"/api/itinerary/{session_id}"),
            client.get(f"/api/itinerary/{session_id}/export"),
            client.post(f"/api/itinerary/{session_id}/save", headers=USER),
        ):
            assert response.status_code == 404
            assert response.json() == {"error": "No itinerary generated yet"}

    def test_unknown_session(self, client):
        response = client.get("/api/form/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"


class TestSavedItineraries:

    def test_get_and_delete(self, client):
        session_id = client.post("/api/session").json()["session_id"]
        client.put(f"/api/form/{session_id}", json={"field_updates": {"destination": "Kyoto", "duration": 3}})
        client.post(f"/api/itinerary/{session_id}/generate", headers=USER)
        record_id = client.post(f"/api/itinerary/{session_id}/save", headers=USER).json()["id"]

        assert client.get(f"/api/itineraries/{record_id}", headers=USER).status_code == 200
        assert client.get(f"/api/itineraries/{record_id}", headers={"X-User-Id": "user-2"}).status_code == 404
        assert client.delete(f"/api/itineraries/{record_id}", headers=USER).status_code == 204
        assert client.get(f"/api/itineraries/{record_id}", headers=USER).status_code == 404

    def test_requires_sign_in(self, client):
        assert client.get("/api/itineraries").status_code == 401


def test_options(client):
    data = client.get("/api/options").json()

    assert data["travelStyle"] == ["solo", "couple", "family", "friends", "balanced"]
    assert "Local Cuisine" in data["foodPreferences"]


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
