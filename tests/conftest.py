"""
Pytest configuration and shared fixtures for all tests.
"""
import os
from datetime import datetime, timedelta, timezone

# must be set before app modules read settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PROGRESS_STEP", "25")
os.environ.setdefault("PROGRESS_INTERVAL_SECONDS", "0")

import pytest
from fastapi.testclient import TestClient

from app.core.errors import OracleError, PersistenceError
from app.repositories.kv_repo import MemoryKeyValueStore
from app.schemas.emotion import AnalyzeResult, EmotionAnalysisResult
from app.services.checkin import CheckInSession
from app.services.history import HistoryStore
from app.services.recommendations import make_emotion, rank_recommendations


def make_analyze_result(
    response="Thanks for sharing. What's been on your mind?",
    sentiment=None,
    topics=None,
    recommendations=None,
    should_complete=False,
) -> AnalyzeResult:
    return AnalyzeResult.model_validate({
        "response": response,
        "sentiment": sentiment if sentiment is not None else {"happiness": 60, "anxiety": 30, "energy": 55},
        "topics": topics if topics is not None else ["work"],
        "recommendations": recommendations if recommendations is not None else ["Take a short walk"],
        "shouldComplete": should_complete,
    })


def make_emotion_analysis(primary="sadness", secondary=None, anxiety=40.0) -> EmotionAnalysisResult:
    p = make_emotion(primary, 70)
    s = make_emotion(secondary, 30) if secondary else None
    return EmotionAnalysisResult(
        primary_emotion=p,
        secondary_emotion=s,
        overall_sentiment=-0.3,
        stress_level=55,
        anxiety_level=anxiety,
        recommendations=rank_recommendations(p, s, anxiety, suffix="test"),
    )


class FakeOracle:
    """
    Scriptable oracle. Queue replies (or exceptions) per call; set a gate future to
    hold a call in flight until the test resolves it.
    """

    def __init__(self):
        self.analyze_replies = []
        self.emotion_reply = None
        self.analyze_calls = []
        self.detect_calls = []
        self.analyze_gate = None
        self.detect_gate = None

    async def analyze(self, messages, user_input):
        self.analyze_calls.append((list(messages), user_input))
        if self.analyze_gate is not None:
            await self.analyze_gate
        reply = self.analyze_replies.pop(0) if self.analyze_replies else make_analyze_result()
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def detect_emotions(self, messages):
        self.detect_calls.append(list(messages))
        if self.detect_gate is not None:
            await self.detect_gate
        reply = self.emotion_reply if self.emotion_reply is not None else make_emotion_analysis()
        if isinstance(reply, Exception):
            raise reply
        return reply


class FixedClock:
    """Callable clock the tests move by hand."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class FailingKeyValueStore:
    """Backing store that is always unavailable."""

    def __init__(self):
        self.get_calls = 0
        self.set_calls = 0

    def get(self, key):
        self.get_calls += 1
        raise PersistenceError("storage unavailable")

    def set(self, key, value):
        self.set_calls += 1
        raise PersistenceError("storage unavailable")


@pytest.fixture
def fake_oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def oracle_error() -> OracleError:
    return OracleError("Gemini returned HTTP 500")


@pytest.fixture
def session(fake_oracle) -> CheckInSession:
    """Check-in session with a fast progress ramp."""
    return CheckInSession(fake_oracle, progress_step=25, progress_interval=0)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def memory_kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def history(memory_kv, clock) -> HistoryStore:
    return HistoryStore(memory_kv, now=clock).load()


@pytest.fixture
def test_app(fake_oracle, memory_kv):
    from app.main import create_app
    return create_app(oracle=fake_oracle, kv=memory_kv)


@pytest.fixture
def sync_client(test_app):
    """TestClient kept open so background processing tasks survive between requests."""
    with TestClient(test_app) as client:
        yield client



@pytest.fixture
def analyze_result():
    """Factory for oracle analyze payloads."""
    return make_analyze_result


@pytest.fixture
def emotion_analysis():
    """Factory for oracle emotion analyses."""
    return make_emotion_analysis


@pytest.fixture
def failing_kv() -> FailingKeyValueStore:
    return FailingKeyValueStore()
