import pytest
from fastapi.testclient import TestClient

from app.schemas.analysis_schemas import AnalysisVerdict, ContentType


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep tests away from real OpenAI / Supabase credentials."""
    for name in (
        "OPENAI_API_KEY",
        "SUPABASE_URL",
        "SUPABASE_KEY",
        "SUPABASE_SERVICE_ROLE_KEY",
        "HISTORY_TABLE",
        "OPENAI_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


class RecordingOracle:
    """Stands in for the reasoning service and records every call."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {
            "isSafe": True,
            "reasoning": "Well-known domain with a valid certificate.",
            "trustScore": 92,
        }
        self.error = error
        self.calls = []

    def __call__(self, prompt, output_schema):
        self.calls.append((prompt, output_schema))
        if self.error is not None:
            raise self.error
        return dict(self.response)


@pytest.fixture
def oracle():
    return RecordingOracle()


@pytest.fixture
def patched_oracle(monkeypatch):
    recorder = RecordingOracle()
    monkeypatch.setattr(
        "app.services.analysis_pipeline.request_structured_verdict",
        recorder,
    )
    return recorder


@pytest.fixture
def sample_verdict():
    return AnalysisVerdict(
        is_safe=False,
        reasoning="Lookalike domain imitating a bank login page.",
        trust_score=12,
        content_type=ContentType.URL,
        extracted_url="https://secure-hdfc-login.example.net",
    )


@pytest.fixture
def client():
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_oracle():
    return RecordingOracle
