import pytest
from fastapi.testclient import TestClient

from ace.channels.push import RecordingSink
from ace.core.config import AppConfig
from ace.core.container import build_services
from ace.llm.service import StubLLMClient
from ace.main import create_app
from ace.people.lookup import StubPeopleLookup
from ace.research.provider import StubSearchProvider
from tests.helpers import hit

PREP_ROUTINE = {"type": "Before Meeting Prep", "isEnabled": True, "routineDescription": "Prep me"}

BRIEF_BODY = {
    "meeting": {
        "summary": "Board Review",
        "startTime": "2025-03-03T10:00:00Z",
        "endTime": "2025-03-03T11:00:00Z",
        "attendees": [{"email": "sarah@external.com", "displayName": "Sarah External"}],
    },
    "accessToken": "tok",
}


def _services(**config):
    provider = StubSearchProvider({
        "madrona.com": [hit("Madrona | Venture Capital", "https://www.madrona.com", "Seattle venture capital firm")],
        "Madrona": [hit("Madrona | Venture Capital", "https://www.madrona.com", "Seattle venture capital firm")],
    })
    return build_services(
        AppConfig(calendar_provider="mock", **config),
        search_provider=provider,
        people_lookup=StubPeopleLookup(),
        llm=StubLLMClient("Brief text"),
        sink=RecordingSink(),
    )


@pytest.fixture
def services():
    return _services()


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def test_root_ok(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


class TestRegister:
    """Test session registration."""

    def test_register(self, client, services):
        r = client.post("/register", json={
            "userId": "jane@acme.com",
            "accessToken": "tok",
            "routines": [PREP_ROUTINE],
            "deviceToken": "device-1",
            "userName": "Jane Doe",
        })

        assert r.status_code == 200
        assert r.json() == {"ok": True, "user_id": "jane@acme.com", "routines": 1, "device_token": True}
        session = services.sessions.get("jane@acme.com")
        assert session.name == "Jane Doe"
        assert session.routines[0].description == "Prep me"

    def test_missing_access_token(self, client):
        r = client.post("/register", json={"userId": "jane@acme.com", "routines": []})
        assert r.status_code == 422

    def test_unknown_routine_type(self, client):
        r = client.post("/register", json={
            "userId": "jane@acme.com",
            "accessToken": "tok",
            "routines": [{"type": "Lunch Reminder"}],
        })
        assert r.status_code == 422


class TestAgentRoutes:
    """Test manual agent cycles and display state."""

    def test_register_then_run(self, client, services):
        client.post("/register", json={"userId": "jane@acme.com", "accessToken": "tok", "routines": [PREP_ROUTINE]})

        r = client.post("/agent/run")

        assert r.status_code == 200
        report = r.json()["report"]
        assert report["users"] == 1
        assert report["succeeded"] == 1
        assert report["actions"]["jane@acme.com"] == ["clear", "show"]

        display = client.get("/agent/display").json()["display"]
        assert display == {"jane@acme.com": "mock-external-strategy-sync"}

        shown = services.sink.delivered["jane@acme.com"][-1]
        assert shown.title == "Prep: External Strategy Sync"

    def test_second_run_is_silent(self, client):
        client.post("/register", json={"userId": "jane@acme.com", "accessToken": "tok", "routines": [PREP_ROUTINE]})
        client.post("/agent/run")

        report = client.post("/agent/run").json()["report"]
        assert report["actions"]["jane@acme.com"] == []

    def test_run_without_users(self, client):
        report = client.post("/agent/run").json()["report"]
        assert report["users"] == 0

    def test_status(self, client):
        r = client.get("/agent/status")
        assert r.status_code == 200
        agent = r.json()["agent"]
        assert agent["running"] is False
        assert agent["enabled"] is False
        assert agent["registered_users"] == 0


class TestEnrichPerson:
    """Test the enrichment endpoint."""

    def test_enrich(self, client):
        r = client.post("/enrich-person", json={"name": "Ted Kummert", "email": "ted@madrona.com"})

        assert r.status_code == 200
        data = r.json()
        assert data["companyName"] == "Madrona"
        assert data["researchSummary"].startswith("Company: Madrona | Venture Capital")
        assert data["requestID"]
        assert data["linkedInTitle"] is None
        assert data["linkedInUrl"] is None

    def test_nothing_found(self, client):
        data = client.post("/enrich-person", json={"name": "Nobody Here", "email": "nobody@gmail.com"}).json()
        assert data["companyName"] is None
        assert data["researchSummary"] is None

    def test_invalid_email(self, client):
        r = client.post("/enrich-person", json={"name": "Ted", "email": "not-an-email"})
        assert r.status_code == 422


class TestGenerateBrief:
    """Test on-demand brief generation."""

    def test_generate(self, client):
        r = client.post("/generate-brief", json={**BRIEF_BODY, "userName": "Jane Doe", "userEmail": "jane@acme.com"})

        assert r.status_code == 200
        data = r.json()
        assert data["brief"] == "Brief text"
        assert "- Name: Board Review" in data["prompt"]
        assert "- **Sarah External** (sarah@external.com)" in data["prompt"]
        assert "Name: Jane Doe\nEmail: jane@acme.com" in data["prompt"]

    def test_naive_start_time(self, client):
        body = {**BRIEF_BODY, "meeting": {**BRIEF_BODY["meeting"], "startTime": "2025-03-03T10:00:00", "endTime": None}}
        r = client.post("/generate-brief", json=body)
        assert r.status_code == 400

    def test_end_before_start(self, client):
        body = {**BRIEF_BODY, "meeting": {**BRIEF_BODY["meeting"], "endTime": "2025-03-03T09:00:00Z"}}
        r = client.post("/generate-brief", json=body)
        assert r.status_code == 400

    def test_missing_title(self, client):
        meeting = {k: v for k, v in BRIEF_BODY["meeting"].items() if k != "summary"}
        r = client.post("/generate-brief", json={**BRIEF_BODY, "meeting": meeting})
        assert r.status_code == 422


class TestApiKey:
    """Test the optional API key guard."""

    def test_rejected_without_key(self):
        client = TestClient(create_app(_services(api_key="secret")))
        r = client.post("/register", json={"userId": "u", "accessToken": "tok"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid or missing API key"

    def test_accepted_with_key(self):
        client = TestClient(create_app(_services(api_key="secret")))
        r = client.post("/register", json={"userId": "u", "accessToken": "tok"}, headers={"x-api-key": "secret"})
        assert r.status_code == 200

    def test_read_only_routes_open(self):
        client = TestClient(create_app(_services(api_key="secret")))
        assert client.get("/agent/status").status_code == 200
        assert client.get("/healthz").status_code == 200
