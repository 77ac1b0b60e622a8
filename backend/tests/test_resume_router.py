import httpx
from fastapi.testclient import TestClient

from app.main import create_app
from app.services import grading
from app.services.resume_store import InMemoryResumeStore

from conftest import FakeGenaiClient


def resume_body(name="Jane Doe"):
    return {
        "personalInfo": {"name": name, "email": "jane@example.com"},
        "education": [],
        "skills": [{"name": "Python", "level": "Expert"}],
        "experience": [],
        "projects": [],
    }


def test_health(make_client):
    client = make_client()

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["services"]["grading"] == "missing_api_key"


def test_fetch_profile_returns_seeded_demo(make_client):
    client = make_client()

    response = client.post("/api/resume/fetch-profile")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["personalInfo"]["name"] == "Alex Johnson"
    assert body["data"]["education"][0]["college"] == "State University"


def test_fetch_profile_unknown_student(make_client):
    client = make_client()

    response = client.post("/api/resume/fetch-profile", json={"studentId": "nobody"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Profile not found."}


def test_save_draft_then_fetch(make_client):
    client = make_client()

    saved = client.post("/api/resume/save-draft", json={"studentId": "s-1", "resumeData": resume_body()})
    fetched = client.post("/api/resume/fetch-profile", json={"studentId": "s-1"})

    assert saved.status_code == 200
    assert saved.json() == {"success": True, "message": "Draft saved successfully!", "version": 1}
    assert fetched.json()["data"]["personalInfo"]["name"] == "Jane Doe"
    assert fetched.json()["data"]["achievements"] == ""


def test_save_draft_without_student_uses_default(make_client):
    client = make_client()

    saved = client.post("/api/resume/save-draft", json={"resumeData": resume_body("Updated")})
    fetched = client.post("/api/resume/fetch-profile")

    assert saved.json()["version"] == 2
    assert fetched.json()["data"]["personalInfo"]["name"] == "Updated"


def test_history(make_client):
    client = make_client()
    client.post("/api/resume/save-draft", json={"studentId": "s-2", "resumeData": resume_body("First")})
    client.post("/api/resume/save-draft", json={"studentId": "s-2", "resumeData": resume_body("Second")})

    history = client.get("/api/resume/history/s-2").json()
    empty = client.get("/api/resume/history/unknown").json()

    assert [doc["personalInfo"]["name"] for doc in history["data"]] == ["Second", "First"]
    assert empty == {"success": True, "data": []}


def test_grade_success(make_client, fake_client):
    client = make_client(fake_client)

    response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert set(body["data"]) == {"overallScore", "categoryScores", "suggestions", "enhancedContent"}
    assert set(body["data"]["categoryScores"]) == {
        "atsCompatibility", "contentQuality", "formattingDesign", "completeness"
    }
    assert len(fake_client.calls) == 1


def test_grade_without_credential(make_client):
    client = make_client(None)

    response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["errorType"] == "ConfigurationError"
    assert "API Key is missing" in body["message"]


def test_grade_provider_failure(make_client):
    genai_client = FakeGenaiClient(error=httpx.ConnectError("network unreachable"))
    client = make_client(genai_client)

    response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 500
    body = response.json()
    assert body["errorType"] == "ProviderError"
    assert body["errorDetail"] == "network unreachable"


def test_grade_malformed_reply(make_client):
    client = make_client(FakeGenaiClient(text="not json at all"))

    response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 500
    assert response.json()["errorType"] == "SchemaViolationError"


def test_grade_invalid_scores(make_client, grade_payload):
    import json
    grade_payload["overallScore"] = 250
    client = make_client(FakeGenaiClient(text=json.dumps(grade_payload)))

    response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 500
    body = response.json()
    assert body["errorType"] == "ResponseValidationError"
    assert body["errorDetail"][0]["loc"] == "overallScore"


def test_generate_saves_version(make_client):
    client = make_client()

    response = client.post("/api/resume/generate", json={"studentId": "s-3", "resumeData": resume_body()})

    assert response.json() == {"success": True, "message": "Resume successfully generated and saved!"}
    assert len(client.get("/api/resume/history/s-3").json()["data"]) == 1


def test_generate_without_body(make_client):
    client = make_client()

    response = client.post("/api/resume/generate")

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_apply_suggestions_echoes_resume(make_client):
    client = make_client()
    body = {
        "resume": resume_body(),
        "suggestions": [{"priority": "High", "area": "ATS Keywords", "text": "Add CI/CD."}],
    }

    response = client.post("/api/resume/apply-suggestions", json=body)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Suggestions applied. Please refresh."
    assert data["updatedResume"]["personalInfo"]["name"] == "Jane Doe"


def test_completion(make_client):
    client = make_client()

    response = client.post("/api/resume/completion", json={"resumeData": resume_body()})

    assert response.json() == {"success": True, "data": {"percentage": 75}}


def test_download_not_implemented(make_client):
    client = make_client()

    response = client.get("/api/resume/download/abc123")

    assert response.status_code == 501
    assert "Not Implemented" in response.text


def test_api_responses_are_not_cached(make_client):
    client = make_client()

    response = client.get("/api/resume/history/anyone")

    assert response.headers["Cache-Control"] == "no-cache, no-store, must-revalidate"


def test_grade_unexpected_client_error_uses_envelope(make_client):
    client = make_client(FakeGenaiClient(error=RuntimeError("aiohttp session closed")))

    response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["errorType"] == "ProviderError"
    assert body["errorDetail"] == "aiohttp session closed"


def test_grade_without_credential_makes_no_call(monkeypatch, settings):
    constructed = []

    class RecordingClient(FakeGenaiClient):
        def __init__(self, *args, **kwargs):
            super().__init__(text="{}")
            constructed.append(self)

    monkeypatch.setattr(grading.genai, "Client", RecordingClient)
    app = create_app(settings=settings, resume_store=InMemoryResumeStore())

    with TestClient(app) as client:
        response = client.post("/api/resume/grade", json={"resumeData": resume_body()})

    assert response.status_code == 500
    assert response.json()["errorType"] == "ConfigurationError"
    assert constructed == []


def test_save_draft_merges_duplicate_skills(make_client):
    client = make_client()
    body = resume_body()
    body["skills"] = [
        {"name": "JS", "level": "Beginner"},
        {"name": "Python", "level": "Expert"},
        {"name": "javascript", "level": "Expert"},
        {"name": "python", "level": "Intermediate"},
    ]

    client.post("/api/resume/save-draft", json={"studentId": "s-4", "resumeData": body})
    client.post("/api/resume/generate", json={"studentId": "s-5", "resumeData": body})

    for student in ("s-4", "s-5"):
        saved = client.post("/api/resume/fetch-profile", json={"studentId": student}).json()["data"]
        assert saved["skills"] == [{"name": "JS", "level": "Expert"}, {"name": "Python", "level": "Expert"}]
