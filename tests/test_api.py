import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    def _login(email, name=None, with_profile=True):
        r = client.post("/api/auth/register", json={"email": email, "password": "secret123"})
        assert r.status_code == 201, r.text
        r = client.post("/api/auth/login", json={"email": email, "password": "secret123"})
        assert r.status_code == 200, r.text
        headers = {"Authorization": f"Bearer {r.json()['accessToken']}"}
        if with_profile:
            r = client.put("/api/profile", json={"name": name or email.split("@")[0]}, headers=headers)
            assert r.status_code == 200, r.text
        return headers
    return _login


def create_project(client, headers, **overrides):
    body = {
        "title": "AI Chatbot Platform",
        "type": "Software Development",
        "visibility": "public",
        "requiredSkills": ["Java", "Spring Boot", "React"],
        "preferredTechnologies": "Docker, Kubernetes",
        "domain": ["AI/ML"],
        "githubRepo": "https://github.com/user/project",
        "description": "An intelligent chatbot platform.",
    }
    body.update(overrides)
    return client.post("/api/projects", json=body, headers=headers)


def assert_envelope(response, status):
    assert response.status_code == status, response.text
    body = response.json()
    assert set(body) == {"timestamp", "status", "error", "message"}
    assert body["status"] == status
    return body


# ------------------------------------------------------------------
# auth & profile
# ------------------------------------------------------------------

def test_register_login_me(client, login):
    headers = login("Alice@Example.com", with_profile=False)
    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["email"] == "alice@example.com"


def test_duplicate_registration(client, login):
    login("a@x.com", with_profile=False)
    r = client.post("/api/auth/register", json={"email": "a@x.com", "password": "secret123"})
    assert_envelope(r, 400)


def test_bad_password(client, login):
    login("a@x.com", with_profile=False)
    r = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong-password"})
    assert_envelope(r, 401)


def test_requires_token(client):
    body = assert_envelope(client.get("/api/projects/teammates/requests"), 401)
    assert body["error"] == "Unauthorized"
    assert_envelope(client.get("/api/projects", headers={"Authorization": "Bearer nope"}), 401)


def test_profile_roundtrip(client, login):
    headers = login("a@x.com", with_profile=False)
    assert_envelope(client.get("/api/profile", headers=headers), 404)

    r = client.put("/api/profile", json={"name": "Alice", "department": "CSE"}, headers=headers)
    assert r.status_code == 200
    r = client.put("/api/profile", json={"year": "3"}, headers=headers)
    profile = client.get("/api/profile", headers=headers).json()
    assert (profile["name"], profile["department"], profile["year"]) == ("Alice", "CSE", "3")


# ------------------------------------------------------------------
# projects
# ------------------------------------------------------------------

def test_create_and_get_project(client, login):
    owner = login("o@x.com")
    r = create_project(client, owner)
    assert r.status_code == 201, r.text
    project = r.json()
    assert project["type"] == "Software Development"
    assert project["requiredSkills"] == ["Java", "Spring Boot", "React"]
    assert project["preferredTechnologies"] == ["Docker", "Kubernetes"]
    assert project["email"] == "o@x.com"
    assert project["status"] == "ACTIVE"

    r = client.get(f"/api/projects/{project['id']}", headers=owner)
    assert r.status_code == 200
    assert r.json()["teammates"] == []

    explore = client.get("/api/projects/explore").json()
    assert [p["postedBy"]["email"] for p in explore] == ["o@x.com"]


def test_create_project_missing_fields(client, login):
    owner = login("o@x.com")
    body = assert_envelope(create_project(client, owner, title=""), 400)
    assert body["message"] == "Missing required fields"


@pytest.mark.parametrize("bad_id", ["undefined", "null", "abc"])
def test_bad_project_id(client, login, bad_id):
    owner = login("o@x.com")
    body = assert_envelope(client.get(f"/api/projects/{bad_id}", headers=owner), 400)
    assert body["message"] == "Invalid project id"


def test_unknown_project(client, login):
    owner = login("o@x.com")
    assert_envelope(client.get("/api/projects/999", headers=owner), 404)


# ------------------------------------------------------------------
# teammates
# ------------------------------------------------------------------

def test_invite_accept_complete_flow(client, login):
    owner = login("o@x.com", "Owner")
    member = login("m@x.com", "Member")
    pid = create_project(client, owner).json()["id"]

    r = client.post(f"/api/projects/{pid}/teammates", json={"email": "m@x.com"}, headers=owner)
    assert r.status_code == 201, r.text
    invite = r.json()
    assert invite["type"] == "JOIN_REQUEST"
    assert invite["status"] == "PENDING"
    assert invite["rateeEmail"] is None

    again = client.post(f"/api/projects/{pid}/teammates", json={"email": "m@x.com"}, headers=owner)
    assert again.json()["requestId"] == invite["requestId"]

    incoming = client.get("/api/projects/teammates/requests", headers=member).json()
    assert [r["requestId"] for r in incoming] == [invite["requestId"]]
    assert incoming[0]["projectTitle"] == "AI Chatbot Platform"

    r = client.post(f"/api/projects/teammates/requests/{invite['requestId']}/accept", headers=member)
    assert r.status_code == 200, r.text
    assert r.json()["memberEmail"] == "m@x.com"
    assert client.get("/api/projects/teammates/requests", headers=member).json() == []

    mates = client.get(f"/api/projects/{pid}", headers=owner).json()["teammates"]
    assert [(t["email"], t["name"]) for t in mates] == [("m@x.com", "Member")]
    assert [p["id"] for p in client.get("/api/projects", headers=member).json()] == [pid]

    r = client.post(f"/api/projects/{pid}/complete", headers=owner)
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Project marked as completed"
    assert r.json()["project"]["status"] == "COMPLETED"

    to_owner = client.get("/api/projects/teammates/requests", headers=owner).json()
    to_member = client.get("/api/projects/teammates/requests", headers=member).json()
    assert [(x["type"], x["rateeEmail"], x["requesterEmail"]) for x in to_owner] == \
        [("RATING_REQUEST", "m@x.com", "System")]
    assert [(x["type"], x["rateeEmail"], x["rateeName"]) for x in to_member] == \
        [("RATING_REQUEST", "o@x.com", "Owner")]

    # rating prompts are dismissed through reject, not accept
    rid = to_member[0]["requestId"]
    assert_envelope(client.post(f"/api/projects/teammates/requests/{rid}/accept", headers=member), 400)
    r = client.post(f"/api/projects/teammates/requests/{rid}/reject", headers=member)
    assert r.json()["message"] == "Request rejected"


def test_invite_errors_map_to_status_codes(client, login):
    owner = login("o@x.com")
    member = login("m@x.com")
    pid = create_project(client, owner).json()["id"]
    url = f"/api/projects/{pid}/teammates"

    assert_envelope(client.post(url, json={"email": "m@x.com"}, headers=member), 403)
    assert_envelope(client.post(url, json={"email": "o@x.com"}, headers=owner), 400)
    assert_envelope(client.post(url, json={}, headers=owner), 400)
    assert_envelope(client.post(url, json={"email": "ghost@x.com"}, headers=owner), 404)
    assert_envelope(client.post("/api/projects/999/teammates", json={"email": "m@x.com"}, headers=owner), 404)

    rid = client.post(url, json={"email": "m@x.com"}, headers=owner).json()["requestId"]
    client.post(f"/api/projects/teammates/requests/{rid}/accept", headers=member)
    body = assert_envelope(client.post(url, json={"email": "m@x.com"}, headers=owner), 409)
    assert body["message"] == "User already a teammate"


def test_accept_and_reject_errors(client, login):
    owner = login("o@x.com")
    member = login("m@x.com")
    pid = create_project(client, owner).json()["id"]
    rid = client.post(f"/api/projects/{pid}/teammates", json={"email": "m@x.com"}, headers=owner).json()["requestId"]

    assert_envelope(client.post(f"/api/projects/teammates/requests/{rid}/accept", headers=owner), 403)
    assert_envelope(client.post(f"/api/projects/teammates/requests/{rid}/reject", headers=owner), 403)
    assert_envelope(client.post("/api/projects/teammates/requests/undefined/accept", headers=member), 400)

    assert client.post(f"/api/projects/teammates/requests/{rid}/reject", headers=member).status_code == 200
    assert_envelope(client.post(f"/api/projects/teammates/requests/{rid}/accept", headers=member), 404)


def test_complete_requires_owner(client, login):
    owner = login("o@x.com")
    member = login("m@x.com")
    pid = create_project(client, owner).json()["id"]
    assert_envelope(client.post(f"/api/projects/{pid}/complete", headers=member), 403)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "database": "connected"}
