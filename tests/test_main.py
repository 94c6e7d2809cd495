"""
Unit tests for app.main module and error handlers.
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch
from sqlalchemy.orm import Session, sessionmaker
from app.core.errors import SessionBusyError
from app.db.session import build_engine
from app.main import create_app
from app.repositories.kv_repo import MemoryKeyValueStore
from app.services.ai import GeminiOracle
from app.services.history import RESULTS_KEY


class TestCreateApp:
    """Test create_app function."""

    def test_returns_fastapi_instance(self, fake_oracle, memory_kv):
        """Test that create_app returns a FastAPI instance named from settings."""
        app = create_app(oracle=fake_oracle, kv=memory_kv)

        assert isinstance(app, FastAPI)
        assert app.title == "MindMosaic API"

    def test_includes_all_routers(self, fake_oracle, memory_kv):
        """Test that every route group is mounted."""
        app = create_app(oracle=fake_oracle, kv=memory_kv)
        paths = set(app.openapi()["paths"])

        for path in (
            "/health", "/health/full",
            "/api/checkins", "/api/checkins/{session_id}/messages",
            "/api/dashboard", "/api/history", "/api/recommendations/{recommendation_id}/toggle",
            "/api/ai/analyze", "/api/ai/detect-emotions",
            "/api/resources", "/api/resources/categories", "/api/resources/{slug}",
        ):
            assert path in paths

    def test_defaults_to_gemini_and_sql_store(self):
        """Test the production wiring when nothing is injected."""
        app = create_app()

        assert isinstance(app.state.oracle, GeminiOracle)
        assert app.state.history.results == []

    def test_history_loaded_from_store(self, fake_oracle):
        """Test that existing history is loaded at startup."""
        kv = MemoryKeyValueStore({RESULTS_KEY: '[{"id": "a", "created_at": "2024-03-20T12:00:00Z", '
                                               '"sentiment": {"happiness": 10}, "topics": [], '
                                               '"recommendation_titles": []}]'})

        app = create_app(oracle=fake_oracle, kv=kv)

        assert [r.id for r in app.state.history.results] == ["a"]

    def test_starts_when_store_unopenable(self, fake_oracle):
        """Test that an unreachable database degrades to in-memory history instead of failing startup."""
        bad_engine = build_engine("sqlite:////nonexistent_dir/sub/mm.db")
        bad_factory = sessionmaker(bad_engine, expire_on_commit=False, class_=Session)

        with patch("app.main.engine", bad_engine), patch("app.main.SessionLocal", bad_factory):
            app = create_app(oracle=fake_oracle)

        assert app.state.history.results == []
        with TestClient(app) as client:
            toggled = client.post("/api/recommendations/r-0/toggle")
            health = client.get("/health/full").json()

        assert toggled.status_code == 200
        assert toggled.json() == {"id": "r-0", "completed": True}
        assert health["status"] == "degraded"
        assert health["database"] == "disconnected"
        bad_engine.dispose()


class TestErrorHandlers:
    """Test domain exception handlers."""

    def test_session_busy_is_409(self, test_app):
        """Test that SessionBusyError maps to 409 SESSION_BUSY."""

        @test_app.get("/_busy")
        async def busy():
            raise SessionBusyError("A message is already being processed")

        with TestClient(test_app) as client:
            response = client.get("/_busy")

        assert response.status_code == 409
        assert response.json() == {
            "error": "Check-in is busy",
            "detail": "A message is already being processed",
            "error_code": "SESSION_BUSY",
        }

    def test_invalid_transition_is_409(self, sync_client):
        """Test that InvalidTransitionError maps to 409 INVALID_TRANSITION."""
        session_id = sync_client.post("/api/checkins").json()["session_id"]

        response = sync_client.post(f"/api/checkins/{session_id}/tab")

        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_TRANSITION"
        assert response.json()["detail"] == "Cannot change analysis tab while check-in is in stage 'intro'"

    @pytest.mark.parametrize("method, path", [
        ("get", "/api/checkins/missing"),
        ("post", "/api/checkins/missing/start"),
        ("post", "/api/checkins/missing/restart"),
    ])
    def test_unknown_session_is_404(self, sync_client, method, path):
        """Test that session routes 404 on unknown ids."""
        assert getattr(sync_client, method)(path).status_code == 404
