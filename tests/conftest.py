"""Shared pytest fixtures and utilities for all tests."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient

from app.core.backend import DataBackend
from app.core.config import get_settings
from app.geocoding.service import GeocodingService, get_geocoding_service
from app.main import app

OWNER_ID = "owner-1111"
APPLICANT_ID = "applicant-2222"

NOMINATIM_RESULT = [
    {"display_name": "100 Main St, Springfield", "lat": "39.1", "lon": "-89.6"},
]


def make_token(user_id: str, email: str = "user@example.com", expires_in: int = 3600) -> str:
    """Access token shaped like the ones the auth provider issues."""
    settings = get_settings()
    payload = {
        "sub": user_id,
        "email": email,
        "aud": settings.JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user_id: str, email: str = "user@example.com") -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, email)}"}


class FakeBackend:
    """Records PostgREST requests and answers from registered routes."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict = {}

    def on(self, method: str, table: str, body=None, status_code: int = 200):
        """``body`` may be a callable taking the request."""
        self.routes[(method, table)] = (status_code, body if body is not None else [])

    def calls(self, method: str, table: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.endswith(f"/{table}")]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        status_code, body = self.routes.get((request.method, table), (200, []))
        if callable(body):
            body = body(request)
        return httpx.Response(status_code, json=body)


class FakeGeocoder:
    """Nominatim stand-in served through httpx.MockTransport."""

    def __init__(self, payload=None, status_code: int = 200, error: Optional[Exception] = None):
        self.payload = NOMINATIM_RESULT if payload is None else payload
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    def service(self) -> GeocodingService:
        return GeocodingService(transport=httpx.MockTransport(self))


@pytest.fixture
def backend():
    """Install a fake data backend on the shared client."""
    fake = FakeBackend()
    DataBackend.client = httpx.AsyncClient(
        transport=httpx.MockTransport(fake),
        base_url="http://backend.test/rest/v1",
    )
    yield fake
    DataBackend.client = None


@pytest.fixture
def geocoder():
    """Route the geocoding dependency to a fake Nominatim."""
    fake = FakeGeocoder()
    app.dependency_overrides[get_geocoding_service] = fake.service
    yield fake
    app.dependency_overrides.pop(get_geocoding_service, None)


@pytest.fixture
def client(backend, geocoder):
    return TestClient(app)


@pytest.fixture
def fast_debounce(monkeypatch):
    """Shrink the debounce window so sessions settle quickly."""
    monkeypatch.setattr(get_settings(), "SUGGESTION_DEBOUNCE_MS", 10)


def property_row(**overrides) -> dict:
    row = {
        "id": "prop-1",
        "title": "Beautiful House in Downtown",
        "description": "Three bedrooms near the park",
        "price": 299999,
        "address": "100 Main St, Springfield",
        "bedrooms": 3,
        "bathrooms": 2,
        "square_feet": 2000,
        "images": ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"],
        "owner_id": OWNER_ID,
        "latitude": None,
        "longitude": None,
        "created_at": "2024-05-01T12:00:00+00:00",
    }
    row.update(overrides)
    return row


def application_row(**overrides) -> dict:
    row = {
        "id": "app-1",
        "property_id": "prop-1",
        "applicant_id": APPLICANT_ID,
        "email": "applicant@example.com",
        "phone": "555-0100",
        "message": "Is it still available?",
        "status": "pending",
        "created_at": "2024-05-02T09:30:00+00:00",
        "property": {"title": "Beautiful House in Downtown", "address": "100 Main St, Springfield"},
    }
    row.update(overrides)
    return row
