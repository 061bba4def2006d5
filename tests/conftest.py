"""Pytest configuration and shared fixtures for Grafana client tests."""

from collections.abc import Callable, Iterator
import json
import os

import pytest

from typing import Any

import httpx


GRAFANA_ENV_KEYS = (
    "GRAFANA_URL",
    "GRAFANA_AUTH",
    "GRAFANA_DASHBOARD_FILE",
    "GRAFANA_DATASOURCE",
    "GRAFANA_DATASOURCE_TYPE",
    "GRAFANA_FOLDER_ID",
    "GRAFANA_FOLDER_UID",
    "LOG_LEVEL",
)


class FakeGrafana:
    """In-memory stand-in for the Grafana dashboard API.

    Records every request and answers with canned responses. Use
    :attr:`transport` as the client transport.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.dashboards: dict[str, dict[str, Any]] = {}
        self.responders: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Dispatch a request to a canned responder or the default behaviour."""
        self.requests.append(request)

        if request.method in self.responders:
            return self.responders[request.method](request)

        path = request.url.path
        if request.method == "POST" and path.endswith("/api/dashboards/db"):
            body = json.loads(request.content)
            dashboard = body["dashboard"]
            uid = dashboard.get("uid") or "generated-uid"
            self.dashboards[uid] = dashboard
            return httpx.Response(
                200,
                json={
                    "id": len(self.dashboards),
                    "uid": uid,
                    "url": f"/d/{uid}/demo",
                    "status": "success",
                    "version": 1,
                    "slug": "demo",
                },
            )

        if request.method == "DELETE" and "/api/dashboards/uid/" in path:
            uid = path.rsplit("/", 1)[-1]
            dashboard = self.dashboards.pop(uid, None)
            if dashboard is None:
                return httpx.Response(404, json={"message": "Dashboard not found"})
            return httpx.Response(
                200,
                json={
                    "id": 1,
                    "title": dashboard.get("title"),
                    "message": f"Dashboard {dashboard.get('title')} deleted",
                },
            )

        return httpx.Response(404, json={"message": "Not found"})

    def respond(
        self, method: str, status_code: int = 200, **kwargs: Any
    ) -> None:
        """Answer every ``method`` request with a fixed response."""
        self.responders[method] = lambda _request: httpx.Response(
            status_code, **kwargs
        )

    def fail(self, method: str, exc: Exception) -> None:
        """Raise ``exc`` from the transport for every ``method`` request."""

        def raise_error(_request: httpx.Request) -> httpx.Response:
            raise exc

        self.responders[method] = raise_error

    def sent_json(self, index: int = 0) -> Any:
        """Decoded JSON body of a recorded request."""
        return json.loads(self.requests[index].content)


@pytest.fixture
def fake_grafana() -> FakeGrafana:
    """Provide a fresh fake Grafana server."""
    return FakeGrafana()


@pytest.fixture
def clean_grafana_env() -> Iterator[None]:
    """Clean Grafana environment variables before and after test."""
    saved = {key: os.environ.get(key) for key in GRAFANA_ENV_KEYS}

    # Clear all
    for key in saved:
        if key in os.environ:
            del os.environ[key]

    yield

    # Restore
    for key, value in saved.items():
        if value is not None:
            os.environ[key] = value
        elif key in os.environ:
            del os.environ[key]


@pytest.fixture
def sample_dashboard() -> dict[str, Any]:
    """Dashboard model with panels, a query variable and a datasource variable."""
    return {
        "title": "Demo",
        "uid": "demo-uid",
        "tags": ["demo"],
        "panels": [
            {"id": 1, "title": "CPU", "datasource": "old-ds"},
            {"id": 2, "title": "Memory", "datasource": {"type": "x", "uid": "old"}},
        ],
        "templating": {
            "list": [
                {"name": "ds", "type": "datasource", "query": "prometheus"},
                {"name": "ns", "type": "query", "datasource": "old-ds"},
            ]
        },
    }
