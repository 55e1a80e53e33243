"""
Pytest fixtures for the InEvent Weather API tests.

Environment is set before any application import so that no real
database or OpenWeatherMap request is made during collection.
"""

import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-at-least-32-characters-long")
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENWEATHER_API_KEY", "test-openweather-key")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="weather_api_logs_"))
os.environ.setdefault("BACKEND_CORS_ORIGINS", "http://localhost:5173")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from weather_api.database import create_engine_for_url, create_tables, drop_tables, get_db
from weather_api.dependencies.weather import get_weather_service
from weather_api.main import app
from weather_api.services.openweather import OpenWeatherService

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
UPSTREAM_BASE_URL = "https://api.openweather.test/"


@pytest.fixture
async def db():
    """Fresh in-memory database session."""
    engine = create_engine_for_url(TEST_DATABASE_URL)
    await create_tables(engine)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await drop_tables(engine)
    await engine.dispose()


class UpstreamStub:
    """
    Programmable OpenWeatherMap stand-in.

    Map a path suffix (``"weather"``, ``"forecast"``, ``"air_pollution"``)
    to an ``httpx.Response`` or an exception; every request is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def set(self, endpoint, result):
        self.routes[endpoint] = result

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        result = self.routes.get(endpoint)
        if result is None:
            return httpx.Response(404, json={"cod": "404", "message": "city not found"})
        if isinstance(result, Exception):
            raise result
        return result

    def service(self, http_client: httpx.AsyncClient) -> OpenWeatherService:
        return OpenWeatherService(client=http_client, api_key="test-openweather-key")


@pytest.fixture
def upstream():
    """OpenWeatherMap stub shared by service and router tests."""
    return UpstreamStub()


@pytest.fixture
async def weather_service(upstream):
    """OpenWeatherService wired to the stub transport."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(upstream.handler),
        base_url=UPSTREAM_BASE_URL,
    ) as http_client:
        yield upstream.service(http_client)


@pytest.fixture
def client(upstream):
    """
    Test client with an isolated in-memory database and stubbed upstream.

    The client is entered as a context manager so every request runs on
    the same event loop as the database engine.
    """
    engine = create_engine_for_url(TEST_DATABASE_URL)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_weather_service():
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(upstream.handler),
            base_url=UPSTREAM_BASE_URL,
        ) as http_client:
            yield upstream.service(http_client)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_weather_service] = override_get_weather_service

    with TestClient(app) as test_client:
        test_client.portal.call(create_tables, engine)
        yield test_client
        test_client.portal.call(engine.dispose)

    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    """Register a user through the API and return the response body."""
    response = client.post(
        "/api/auth/register",
        json={
            "name": "Maria Silva",
            "email": "maria@example.com",
            "password": "segredo123",
            "city": "São Paulo",
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered_user):
    """Authorization header for the registered user."""
    return {"Authorization": f"Bearer {registered_user['token']}"}
