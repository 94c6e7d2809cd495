"""
Unit tests for app.core.config, app.core.logging and app.core.errors.
"""
import logging
import pytest
from app.core.config import Settings
from app.core.errors import InvalidTransitionError, MindMosaicError, OracleError, PersistenceError, SessionBusyError
from app.core.logging import configure_logging


class TestSettings:
    """Test Settings defaults and environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test the built-in defaults when nothing is set."""
        for name in ("DATABASE_URL", "PROGRESS_STEP", "PROGRESS_INTERVAL_SECONDS", "GEMINI_MODEL"):
            monkeypatch.delenv(name, raising=False)

        s = Settings(_env_file=None)

        assert s.APP_NAME == "MindMosaic API"
        assert s.DATABASE_URL == "sqlite:///./mindmosaic.db"
        assert s.GEMINI_MODEL == "gemini-1.5-flash"
        assert s.PROGRESS_STEP == 5
        assert s.PROGRESS_INTERVAL_SECONDS == 0.15

    def test_environment_override(self, monkeypatch):
        """Test that environment variables win, case-insensitively."""
        monkeypatch.setenv("gemini_api_key", "secret")
        monkeypatch.setenv("PROGRESS_STEP", "10")

        s = Settings(_env_file=None)

        assert s.GEMINI_API_KEY == "secret"
        assert s.PROGRESS_STEP == 10

    def test_invalid_value_rejected(self, monkeypatch):
        """Test that a non-numeric step fails validation."""
        monkeypatch.setenv("PROGRESS_STEP", "fast")

        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestConfigureLogging:
    """Test configure_logging."""

    def test_sets_level_and_quiets_httpx(self):
        """Test that the root level follows the argument and httpx is held at WARNING."""
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")

            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.setLevel(previous)


class TestErrors:
    """Test domain error types."""

    @pytest.mark.parametrize("error", [OracleError, PersistenceError, SessionBusyError])
    def test_share_base(self, error):
        """Test that every domain error derives from MindMosaicError."""
        assert issubclass(error, MindMosaicError)

    def test_invalid_transition_message(self):
        """Test the message and attributes of InvalidTransitionError."""
        error = InvalidTransitionError("send a message", "intro")

        assert str(error) == "Cannot send a message while check-in is in stage 'intro'"
        assert error.action == "send a message"
        assert error.stage == "intro"
