# =============================================================================
# tests/test_health.py - Health Endpoint Tests
# =============================================================================

from unittest.mock import patch

from app import __version__


class TestHealthEndpoints:
    """Test root and /api/health* endpoints."""

    def test_root(self, anon_client):
        body = anon_client.get("/").json()

        assert body["name"] == "Vinyl Tracker API"
        assert body["version"] == __version__

    def test_health(self, anon_client):
        body = anon_client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["environment"] == "development"

    def test_live(self, anon_client):
        assert anon_client.get("/api/health/live").json()["status"] == "alive"

    def test_ready(self, anon_client):
        with patch("app.routers.health.SupabaseClient"):
            body = anon_client.get("/api/health/ready").json()

        assert body["status"] == "ready"
        assert body["checks"] == {"database": "healthy", "storage": "healthy"}

    def test_ready_degraded(self, anon_client):
        with patch("app.routers.health.SupabaseClient") as mock:
            mock.get_client.return_value.storage.list_buckets.side_effect = Exception("403")
            body = anon_client.get("/api/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["storage"].startswith("unhealthy")

