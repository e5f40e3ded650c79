"""Integration test configuration.

The FastAPI app runs through its lifespan against the shared container
fixture, so every request hits the in-memory Supabase fake instead of a
real project.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app

MEMBER_HEADERS = {"Authorization": "Bearer member-token"}
OTHER_HEADERS = {"Authorization": "Bearer other-token"}
ADMIN_HEADERS = {"Authorization": "Bearer admin-token"}


@pytest.fixture
def client(container):
    """TestClient with startup/shutdown run against the test container."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def member_headers(user) -> dict:
    return MEMBER_HEADERS


@pytest.fixture
def other_headers(other_user) -> dict:
    return OTHER_HEADERS


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return ADMIN_HEADERS


def _start_session(client: TestClient) -> str:
    response = client.post("/api/v1/guide/sessions")
    assert response.status_code == 201
    return response.json()["id"]


def _walk_selection(
    client: TestClient,
    session_id: str,
    category: str = "Eat",
    region: str = "North America",
    country: str = "United States",
    city: str = "Austin",
    count: int = 5,
) -> dict:
    base = f"/api/v1/guide/sessions/{session_id}"
    for stage, value in (
        ("category", category),
        ("region", region),
        ("country", country),
        ("city", city),
    ):
        response = client.put(f"{base}/selection/{stage}", json={"value": value})
        assert response.status_code == 200, response.text
    response = client.put(f"{base}/result-count", json={"count": count})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def searched_session(client) -> str:
    """A session with five Austin restaurants in its results."""
    session_id = _start_session(client)
    _walk_selection(client, session_id)
    response = client.post(f"/api/v1/guide/sessions/{session_id}/search")
    assert response.status_code == 200
    return session_id


@pytest.fixture
def start_session(client):
    """Factory: open a new guide session and return its id."""
    return lambda: _start_session(client)


@pytest.fixture
def walk_selection(client):
    """Factory: complete all four stages and the result count for a session."""
    return lambda session_id, **choices: _walk_selection(client, session_id, **choices)
