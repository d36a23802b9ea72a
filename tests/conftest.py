# =============================================================================
# CONFTEST - Shared fixtures for all tests
# =============================================================================
# Centralizes stores, sample quizzes, student sessions and mocks
# =============================================================================

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


# =============================================================================
# ENVIRONMENT FIXTURES
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Configure the test environment globally."""
    env_vars = {
        "STORE_BACKEND": "memory",
        "GEMINI_API_KEY": "",
        "STUB_DELAY_SECONDS": "0",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        yield


@pytest.fixture(autouse=True)
def fresh_config():
    """Drop the cached configuration around every test."""
    from classroom.core import reset_config

    reset_config()
    yield
    reset_config()


@pytest.fixture
def clean_env():
    """Clear environment variables for isolated tests."""
    with patch.dict(os.environ, {}, clear=True):
        yield


# =============================================================================
# TIME FIXTURES
# =============================================================================


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    """Fixed clock for sessions and services."""
    return lambda: now


# =============================================================================
# QUIZ FIXTURES
# =============================================================================


@pytest.fixture
def make_question():
    """Factory for valid 4-option questions."""
    from classroom.models import Question

    def _make(correct: int = 0, text: str = "What is 2 + 2?") -> Question:
        return Question(
            question=text,
            options=["4", "3", "5", "22"],
            correct_answer=correct,
            explanation="Basic arithmetic",
        )

    return _make


@pytest.fixture
def sample_quiz(make_question):
    """Published, untimed quiz with correct answers [0, 1, 2]."""
    from classroom.models import Quiz

    return Quiz(
        id="quiz-1",
        title="Arithmetic",
        description="Warm-up",
        questions=[make_question(0, "Q1"), make_question(1, "Q2"), make_question(2, "Q3")],
        time_limit=0,
        published=True,
        course_id="course-1",
        course_name="Math 101",
        teacher_id="teacher-1",
    )


@pytest.fixture
def timed_quiz(sample_quiz):
    """Same quiz with a 1 minute limit."""
    return sample_quiz.model_copy(update={"id": "quiz-timed", "time_limit": 1})


@pytest.fixture
def student_context():
    from classroom.models import StudentContext

    return StudentContext(
        student_id="student-1",
        name="Ada",
        enrolled_course_ids=frozenset({"course-1"}),
    )


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def documents():
    from classroom.storage import MemoryDocumentStore

    return MemoryDocumentStore()


@pytest.fixture
def store(documents):
    from classroom.storage import LearningStore

    return LearningStore(documents)


@pytest.fixture
def failing_store():
    """Store whose attempt write always fails."""
    from classroom.core import StoreError

    mock = MagicMock()
    mock.save_attempt = AsyncMock(side_effect=StoreError("connection lost"))
    return mock


@pytest.fixture
def mock_agentfs():
    """Mock of AgentFS with an in-memory KV."""
    data: dict = {}

    async def kv_get(key):
        return data.get(key)

    async def kv_set(key, value):
        data[key] = value

    async def kv_delete(key):
        data.pop(key, None)

    async def kv_list(prefix=""):
        return [{"key": key} for key in data if key.startswith(prefix)]

    mock = MagicMock()
    mock.kv = MagicMock()
    mock.kv.get = AsyncMock(side_effect=kv_get)
    mock.kv.set = AsyncMock(side_effect=kv_set)
    mock.kv.delete = AsyncMock(side_effect=kv_delete)
    mock.kv.list = AsyncMock(side_effect=kv_list)
    mock.close = AsyncMock()
    mock.data = data
    return mock


# =============================================================================
# GENERATION FIXTURES
# =============================================================================


@pytest.fixture
def quiz_text():
    """Two well-formed line-format questions."""
    return """Here is your quiz:

Question: What is the capital of France?
1. Berlin
2. Paris
3. Madrid
4. Rome
Correct Answer: 2
Explanation: Paris is the capital of France.

Question: Which planet is known as the Red Planet?
1. Mars
2. Venus
3. Jupiter
4. Saturn
Correct Answer: 1
Explanation: Mars looks red because of iron oxide.
"""


@pytest.fixture
def mock_generation_client():
    """Mock of the generation client."""
    mock = MagicMock()
    mock.generate = AsyncMock(return_value="")
    return mock


# =============================================================================
# FASTAPI FIXTURES
# =============================================================================


@pytest.fixture
def client():
    """FastAPI test client with fresh application state."""
    from fastapi.testclient import TestClient

    import app_state
    from server import app

    app_state.documents = app_state.store = app_state.blobs = None
    app_state.registry = app_state.generator = app_state.assignments = None
    app_state.authoring = app_state.coding_lab = None

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_store(client, sample_quiz, timed_quiz):
    """Store behind the running app, with one enrollment and two quizzes."""
    import app_state

    async def _seed():
        store = await app_state.get_store()
        await store.enroll("student-1", "course-1")
        await store.save_quiz(sample_quiz)
        await store.save_quiz(timed_quiz)
        return store

    return client.portal.call(_seed)


@pytest.fixture
def student_headers():
    return {"X-Student-Id": "student-1", "X-Student-Name": "Ada"}
