"""Health and root endpoint tests."""


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"success": True, "status": "healthy", "database": "connected"}

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/health"


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_malformed_id(self, client, auth_headers, member):
        response = client.get("/api/projects/not-a-uuid", headers=auth_headers(member))
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"
