"""Pytest configuration and fixtures for tests.

The backend is never contacted: a FakeSession stands in for the
`requests.Session` the client sends through, answering from a route table
keyed by (method, path) and recording every call.
"""

from __future__ import annotations

import pytest

from rentadmin.api import RentalistClient


BASE_URL = "http://testserver/api"

NO_JSON = object()


class FakeResponse:
    """Just enough of `requests.Response` for the client."""

    def __init__(self, status_code: int = 200, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._body


class Call:
    def __init__(self, method, path, json=None, params=None, files=None, data=None):
        self.method = method
        self.path = path
        self.json = json
        self.params = params
        self.files = files
        self.data = data

    def __repr__(self) -> str:
        return f"Call({self.method} {self.path})"


class FakeSession:
    """Route table stub for `requests.Session`.

    A route value may be a FakeResponse, an exception instance to raise, or
    a callable taking the Call and returning either.
    """

    def __init__(self, routes=None):
        self.headers = {}
        self.trust_env = True
        self.routes = dict(routes or {})
        self.calls: list[Call] = []

    def add(self, method: str, path: str, response) -> None:
        self.routes[(method, path)] = response

    def request(self, method, url, json=None, params=None, files=None, data=None, timeout=None):
        path = url[len(BASE_URL):]
        call = Call(method, path, json=json, params=params, files=files, data=data)
        self.calls.append(call)

        handler = self.routes.get((method, path))
        if handler is None:
            return FakeResponse(404, {"success": False, "error": f"No route {method} {path}"})
        if callable(handler) and not isinstance(handler, FakeResponse):
            handler = handler(call)
        if isinstance(handler, Exception):
            raise handler
        return handler

    def calls_to(self, method: str, path: str = None) -> list[Call]:
        return [c for c in self.calls if c.method == method and (path is None or c.path == path)]


def ok(data=None, **extra) -> FakeResponse:
    """A `{success: true, data}` envelope."""
    body = {"success": True, "data": data}
    body.update(extra)
    return FakeResponse(200, body)


def failed(status_code: int, error: str = None) -> FakeResponse:
    """An error envelope; without `error` the body is not JSON at all."""
    if error is None:
        return FakeResponse(status_code, NO_JSON)
    return FakeResponse(status_code, {"success": False, "error": error})


# ── Sample records ────────────────────────────────────────────────────────


def listing_data(**overrides) -> dict:
    data = {
        "_id": "L1",
        "title": "Double Room, Near Metro!",
        "slug": "double-room-near-metro",
        "price_per_week": 180,
        "bond": 360,
        "bills_included": True,
        "address": "Calle Mayor 12",
        "suburb": "Centro",
        "room_type": "double",
        "available_from": "2025-09-01",
        "min_term_weeks": 4,
        "preferred_tenants": ["Estudiantes"],
        "house_features": ["WiFi", "Terraza"],
        "rules": ["No fumar"],
        "images": ["https://cdn.test/a.jpg", "https://cdn.test/b.jpg"],
        "status": "published",
        "locale": "es",
        "owner_partner_id": "P1",
        "createdAt": "2025-08-01T10:00:00.000Z",
        "updatedAt": "2025-08-02T10:00:00.000Z",
    }
    data.update(overrides)
    return data


def lead_data(**overrides) -> dict:
    data = {
        "_id": "D1",
        "name": "Ana García",
        "email": "ana@example.com",
        "phone": "+34 600 000 000",
        "message": "¿Sigue disponible?",
        "listing_id": {"_id": "L1", "title": "Double Room, Near Metro!", "slug": "double-room-near-metro"},
        "status": "new",
        "createdAt": "2025-08-03T09:30:00.000Z",
    }
    data.update(overrides)
    return data


def partner_data(**overrides) -> dict:
    data = {
        "_id": "P1",
        "name": "Carlos Ruiz",
        "email": "carlos@example.com",
        "phone": "+34 611 111 111",
        "company_name": "Ruiz Rentals",
        "status": "active",
        "createdAt": "2025-07-01T08:00:00.000Z",
    }
    data.update(overrides)
    return data


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session) -> RentalistClient:
    return RentalistClient(base_url=BASE_URL, timeout=5, session=session)


@pytest.fixture
def web(monkeypatch, client):
    """Flask test client whose views talk to the fake backend."""
    from rentadmin.dashboard import app as dashboard_app

    monkeypatch.setattr(dashboard_app, "get_client", lambda: client)
    dashboard_app.app.config["TESTING"] = True
    with dashboard_app.app.test_client() as test_client:
        yield test_client
