"""
Tests for the health check endpoint and cross-cutting middleware.
"""


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        """Health check should report OK with a timestamp."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["service"] == "Ordo API"
        assert data["timestamp"]

    def test_health_check_ignores_invalid_token(self, client):
        """A garbage bearer token must not break a public route."""
        response = client.get("/api/health", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 200


class TestMiddleware:
    """Security headers, request IDs and error envelopes."""

    def test_security_headers_present(self, client):
        response = client.get("/api/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_request_id_generated(self, client):
        """Every response carries an X-Request-ID."""
        response = client.get("/api/health")
        assert response.headers.get("X-Request-ID")

    def test_request_id_propagated(self, client):
        """A caller-supplied request ID is echoed back."""
        response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_non_json_body_rejected(self, client):
        response = client.post(
            "/api/auth/login",
            content="email=a@b.com",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        assert response.status_code == 415

    def test_schema_errors_are_bad_request(self, client):
        """Pydantic failures come back as 400 BAD_REQUEST with field errors."""
        response = client.post("/api/auth/login", json={"email": "not-an-email"})
        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "BAD_REQUEST"
        fields = {error["field"] for error in data["errors"]}
        assert "email" in fields
        assert "password" in fields
