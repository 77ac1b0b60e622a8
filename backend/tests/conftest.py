import asyncio
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.schemas.resume import ResumeDocument
from app.services.grading import GradingService
from app.services.resume_store import InMemoryResumeStore


VALID_GRADE = {
    "overallScore": 72,
    "categoryScores": {
        "atsCompatibility": 80,
        "contentQuality": 65,
        "formattingDesign": 85,
        "completeness": 58,
    },
    "suggestions": [
        {"priority": "High", "area": "Content Quality", "text": "Quantify the impact of your internship."},
        {"priority": "Low", "area": "Formatting", "text": "Use a consistent date format."},
        {"priority": "Medium", "area": "Completeness", "text": "Add a professional summary."},
    ],
    "enhancedContent": "Data science graduate with hands-on model training experience.",
}


class FakeModels:
    """Stands in for client.aio.models and records every call."""

    def __init__(self, text=None, error=None, delay=0.0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGenaiClient:
    def __init__(self, text=None, error=None, delay=0.0):
        self.models = FakeModels(text=text, error=error, delay=delay)
        self.aio = SimpleNamespace(models=self.models)

    @property
    def calls(self):
        return self.models.calls


@pytest.fixture
def grade_payload():
    return json.loads(json.dumps(VALID_GRADE))


@pytest.fixture
def fake_client(grade_payload):
    return FakeGenaiClient(text=json.dumps(grade_payload))


@pytest.fixture
def sample_resume():
    return ResumeDocument.model_validate({
        "personalInfo": {"name": "Jane Doe", "email": "jane.doe@example.com", "phone": "555-123-4567"},
        "education": [{"college": "Tech University", "degree": "B.S. Computer Science", "cgpa": "3.8", "year": "2024"}],
        "skills": [{"name": "React", "level": "Expert"}, {"name": "Node.js", "level": "Intermediate"}],
        "experience": [{
            "company": "Acme",
            "role": "Intern",
            "duration": "Summer 2023",
            "description": "Built dashboards\nCut page load time by 30%",
        }],
        "projects": [],
    })


@pytest.fixture
def settings():
    return Settings(
        gemini_api_key="",
        storage_backend="memory",
        seed_demo_profile=True,
        default_student_id="mockUserId",
        grading_timeout_seconds=5,
    )


@pytest.fixture
def make_client(settings):
    """Build a TestClient around a grading service using the given fake Gemini client."""
    clients = []

    def _make(genai_client=None):
        app = create_app(
            settings=settings,
            grading_service=GradingService(genai_client, timeout_seconds=settings.grading_timeout_seconds),
            resume_store=InMemoryResumeStore(),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
