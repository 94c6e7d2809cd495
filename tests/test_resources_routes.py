"""
Tests for the resources library routes.
"""


class TestResourceRoutes:
    """Test /api/resources endpoints."""

    def test_list(self, sync_client):
        """Test that the listing omits article bodies."""
        response = sync_client.get("/api/resources")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 6
        assert data[0]["slug"] == "anxiety"
        assert data[0]["link"] == "/resources/anxiety"
        assert "content" not in data[0]

    def test_list_by_category(self, sync_client):
        """Test the category filter."""
        data = sync_client.get("/api/resources", params={"category": "Anxiety"}).json()

        assert [r["slug"] for r in data] == ["anxiety", "breathing"]

    def test_search(self, sync_client):
        """Test the search query."""
        data = sync_client.get("/api/resources", params={"q": "sleep"}).json()

        assert [r["slug"] for r in data] == ["sleep"]

    def test_categories(self, sync_client):
        """Test the category list."""
        assert sync_client.get("/api/resources/categories").json() == [
            "Anxiety", "Meditation", "Depression", "Sleep", "Happiness",
        ]

    def test_detail(self, sync_client):
        """Test that one entry is returned with its content."""
        response = sync_client.get("/api/resources/depression")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "CBT Techniques for Depression"
        assert data["type"] == "Technique"
        assert "Thought Records" in data["content"]

    def test_unknown_slug_is_404(self, sync_client):
        """Test that an unknown slug returns 404."""
        response = sync_client.get("/api/resources/astrology")

        assert response.status_code == 404
        assert response.json()["detail"] == "Resource not found"
