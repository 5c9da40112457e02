import json
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from app.main import app, get_quiz_generator
from app.services.quiz_service import QuizService
from app.services.stub_service import StubQuizService
from app.utils.config import Settings, get_settings

CAPITAL_QUIZ = {
    "questions": [
        {
            "question": "What is the capital of France?",
            "options": ["Paris", "Lyon", "Nice", "Lille"],
            "correct": 0,
        }
    ]
}

def make_llm(content):
    """Chat model double whose ainvoke returns a fixed completion"""
    llm = Mock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return llm

@pytest.fixture
def settings(tmp_path):
    return Settings(
        google_api_key="test-key",
        upload_dir=str(tmp_path / "uploads"),
        stub_delay_seconds=0,
    )

@pytest.fixture
def llm():
    return make_llm(json.dumps(CAPITAL_QUIZ))

@pytest.fixture
def client(settings, llm):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_quiz_generator] = lambda: QuizService(llm)
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def stub_client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_quiz_generator] = lambda: StubQuizService(delay_seconds=0)
    yield TestClient(app)
    app.dependency_overrides.clear()
