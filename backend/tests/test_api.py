from fastapi.testclient import TestClient

from main import create_app
from wanderplan.core.errors import GenerationError
from wanderplan.llm.client import GenerationClient
from wanderplan.services.user_service import UserService
from wanderplan.storage.repository import InMemoryRepository

PARIS = {"destination": "Paris", "days": 3, "budget": "$1000", "interests": ["food", "culture"]}


class FailingBackend:
    name = "failing"

    def generate(self, model, request):
        raise GenerationError("API key not valid")


def _generate(client, headers, body=None):
    return client.post("/itineraries/generate", json=body or PARIS, headers=headers)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_then_login(client):
    registered = client.post(
        "/auth/register", json={"name": "Ada", "email": "Ada@Example.com", "password": "hunter22"}
    )
    assert registered.status_code == 201
    body = registered.json()
    assert body["success"] is True
    assert body["data"]["email"] == "ada@example.com"
    assert "password_hash" not in body["data"]

    logged_in = client.post("/auth/login", json={"email": "ada@example.com", "password": "hunter22"})
    assert logged_in.status_code == 200
    token = logged_in.json()["token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["name"] == "Ada"


def test_login_with_wrong_password(client, owner):
    response = client.post("/auth/login", json={"email": owner.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid credentials"}


def test_requests_without_token_are_unauthorized(client):
    assert client.get("/itineraries").status_code == 401
    assert client.get("/itineraries", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_generate_returns_created_itinerary(client, owner, auth_headers):
    response = _generate(client, auth_headers(owner))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["title"] == "Paris - 3 Days Trip"
    assert data["total_days"] == 3
    assert len(data["days"]) == 3
    assert data["collaborators"] == []
    assert data["is_public"] is False
    assert data["owner"] == {"id": owner.user_id, "name": owner.name, "email": owner.email}


def test_generate_with_missing_params(client, owner, auth_headers):
    response = _generate(client, auth_headers(owner), {"destination": "Paris"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please provide destination, days, and budget"}


def test_generation_failure_carries_remediation_hint(repository, owner, auth_headers):
    failing = GenerationClient(backend=FailingBackend(), models=["m1"])
    client = TestClient(create_app(repository=repository, generation_client=failing))

    response = _generate(client, auth_headers(owner))

    assert response.status_code == 500
    message = response.json()["message"]
    assert "m1: API key not valid" in message
    assert "GEMINI_API_KEY" in message


def test_invalid_body_is_a_bad_request(client, owner, auth_headers):
    response = client.post(
        "/itineraries", json={"destination": "Porto", "total_days": 0, "budget": "1"}, headers=auth_headers(owner)
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_crud_round_trip(client, owner, auth_headers):
    headers = auth_headers(owner)
    itinerary_id = _generate(client, headers).json()["data"]["id"]

    listed = client.get("/itineraries", headers=headers).json()["data"]
    assert [i["id"] for i in listed] == [itinerary_id]

    updated = client.put(f"/itineraries/{itinerary_id}", json={"is_public": True}, headers=headers)
    assert updated.json()["data"]["is_public"] is True

    deleted = client.delete(f"/itineraries/{itinerary_id}", headers=headers)
    assert deleted.json() == {"success": True, "message": "Itinerary deleted successfully"}
    assert client.get(f"/itineraries/{itinerary_id}", headers=headers).status_code == 404


def test_stranger_gets_not_found(client, owner, stranger, auth_headers):
    itinerary_id = _generate(client, auth_headers(owner)).json()["data"]["id"]

    response = client.get(f"/itineraries/{itinerary_id}", headers=auth_headers(stranger))

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_collaborate_endpoints(client, owner, collaborator, auth_headers):
    headers = auth_headers(owner)
    itinerary_id = _generate(client, headers).json()["data"]["id"]
    url = f"/itineraries/{itinerary_id}/collaborate"

    added = client.post(url, json={"email": collaborator.email}, headers=headers)
    assert added.status_code == 200
    assert added.json()["data"]["collaborators"] == [
        {"id": collaborator.user_id, "name": collaborator.name, "email": collaborator.email}
    ]

    duplicate = client.post(url, json={"email": collaborator.email}, headers=headers)
    assert duplicate.status_code == 400

    shared = client.get("/itineraries", headers=auth_headers(collaborator)).json()["data"]
    assert [i["id"] for i in shared] == [itinerary_id]

    removed = client.request("DELETE", url, json={"collaborator_id": collaborator.user_id}, headers=headers)
    assert removed.json()["data"]["collaborators"] == []


def test_collaborate_without_email(client, owner, auth_headers):
    headers = auth_headers(owner)
    itinerary_id = _generate(client, headers).json()["data"]["id"]

    response = client.post(f"/itineraries/{itinerary_id}/collaborate", json={}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Please provide an email"


def test_pdf_download(client, owner, auth_headers):
    headers = auth_headers(owner)
    itinerary_id = _generate(client, headers).json()["data"]["id"]

    response = client.get(f"/itineraries/{itinerary_id}/pdf", headers=headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="paris-3-days.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json()["success"] is False


class OddSummaryBackend:
    name = "odd"

    def generate(self, model, request):
        return '{"days": [{"activities": []}], "summary": {"highlights": 5, "tips": "Go early"}}'


class BrokenRepository(InMemoryRepository):
    def find_itineraries(self, query):
        raise RuntimeError("store exploded")


def test_generate_tolerates_malformed_summary_lists(repository, owner, auth_headers):
    odd = GenerationClient(backend=OddSummaryBackend(), models=["m1"])
    client = TestClient(create_app(repository=repository, generation_client=odd))

    response = _generate(client, auth_headers(owner))

    assert response.status_code == 201
    summary = response.json()["data"]["summary"]
    assert summary["highlights"] == []
    assert summary["tips"] == ["Go early"]


def test_unexpected_errors_use_error_envelope(generation_client, auth_headers):
    repository = BrokenRepository()
    user = UserService(repository=repository).register("Ivy", "ivy@example.com", "secret123")
    client = TestClient(
        create_app(repository=repository, generation_client=generation_client), raise_server_exceptions=False
    )

    response = client.get("/itineraries", headers=auth_headers(user))

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "store exploded" not in body["message"]
