"""
Basic tests for the InEvent Weather API.

This module contains tests for the application shell: root, health,
documentation and error rendering.
"""

from weather_api import __version__


def test_root_endpoint(client):
    """Test the root endpoint returns correct response."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert data["version"] == __version__
    assert "docs" in data


def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_openapi_docs_available(client):
    """Test that OpenAPI documentation is available."""
    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200

    response = client.get("/api/openapi.json")
    assert response.status_code == 200
    data = response.json()
    assert "/api/auth/login" in data["paths"]
    assert "/api/users/me" in data["paths"]
    assert "/api/air-quality" in data["paths"]


def test_unknown_route(client):
    """Unknown paths use the common error body."""
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"error": True, "message": "Rota não encontrada"}


def test_cors_preflight(client):
    """The configured frontend origin may call the API with a bearer token."""
    response = client.options(
        "/api/weather",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "Authorization",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
