"""
Integration tests for dashboard, history and recommendation routes.
"""
from datetime import timedelta
from app.schemas.history import CheckInResultCreate
from app.schemas.sentiment import SentimentVector


def record(app, happiness, topics=(), titles=()):
    return app.state.history.add_result(CheckInResultCreate(
        sentiment=SentimentVector(happiness=happiness),
        topics=list(topics),
        recommendation_titles=list(titles),
    ))


class TestDashboard:
    """Test GET /api/dashboard."""

    def test_empty(self, sync_client):
        """Test that an empty history has no average."""
        response = sync_client.get("/api/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["range"] == "week"
        assert data["check_in_count"] == 0
        assert data["average_sentiment"] is None
        assert data["recent_topics"] == []
        assert data["recent_recommendations"] == []
        assert data["mood_series"] == []

    def test_aggregates(self, sync_client, test_app):
        """Test averages, topics and the daily series."""
        record(test_app, 60, topics=["work", "sleep"], titles=["Walk"])
        record(test_app, 80, topics=["sleep"])

        data = sync_client.get("/api/dashboard", params={"range": "month"}).json()

        assert data["range"] == "month"
        assert data["check_in_count"] == 2
        assert data["average_sentiment"]["happiness"] == 70
        assert data["recent_topics"] == ["sleep", "work"]
        assert data["recent_recommendations"][0]["title"] == "Walk"
        assert data["mood_series"][0]["check_ins"] == 2

    def test_invalid_range(self, sync_client):
        """Test that an unknown range is a validation error."""
        response = sync_client.get("/api/dashboard", params={"range": "decade"})

        assert response.status_code == 422


class TestHistory:
    """Test GET /api/history."""

    def test_lists_results_in_window(self, sync_client, test_app):
        """Test that only results inside the range are returned."""
        recent = record(test_app, 50)
        history = test_app.state.history
        old = recent.model_copy(update={"id": "old", "created_at": recent.created_at - timedelta(days=40)})
        history._results.insert(0, old)

        month = sync_client.get("/api/history", params={"range": "month"}).json()
        year = sync_client.get("/api/history", params={"range": "year"}).json()

        assert [r["id"] for r in month["results"]] == [recent.id]
        assert [r["id"] for r in year["results"]] == ["old", recent.id]


class TestToggleRecommendation:
    """Test POST /api/recommendations/{id}/toggle."""

    def test_toggle_round_trip(self, sync_client, test_app):
        """Test that toggling twice restores the original flag."""
        stored = record(test_app, 50, titles=["Walk"])
        rec_id = f"{stored.id}-0"

        first = sync_client.post(f"/api/recommendations/{rec_id}/toggle").json()
        listed = sync_client.get("/api/dashboard").json()["recent_recommendations"]
        second = sync_client.post(f"/api/recommendations/{rec_id}/toggle").json()

        assert first == {"id": rec_id, "completed": True}
        assert listed[0]["completed"] is True
        assert second == {"id": rec_id, "completed": False}

    def test_persisted_to_store(self, sync_client, memory_kv):
        """Test that the completion map is written to the key-value store."""
        sync_client.post("/api/recommendations/abc-0/toggle")

        assert memory_kv.data["completedRecommendations"] == '{"abc-0":true}'
