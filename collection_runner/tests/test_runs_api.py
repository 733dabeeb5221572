"""
Tests for the collection run endpoint and API error responses.

The network is replaced with httpx.MockTransport through the get_transport
dependency; the environment snapshot through get_environment.
"""

import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from collection_runner.main import app
from collection_runner.routers.runs import get_environment, get_transport
from collection_runner.services.transport import HttpxTransport, TransportResponse


def mock_handler(request: httpx.Request) -> httpx.Response:
    """Fake API: /down refuses connections, /missing is a 404, /echo returns the body."""
    if request.url.path == "/down":
        raise httpx.ConnectError("Connection refused", request=request)
    if request.url.path == "/missing":
        return httpx.Response(404, text="not found")
    if request.url.path == "/echo":
        return httpx.Response(200, text=request.content.decode())
    return httpx.Response(200, json={
        "path": request.url.path,
        "authorization": request.headers.get("Authorization"),
    })


mock_client = httpx.AsyncClient(transport=httpx.MockTransport(mock_handler))


def override_get_transport() -> HttpxTransport:
    """Override transport dependency for testing."""
    return HttpxTransport(mock_client)


def override_get_environment() -> dict[str, str]:
    """Override environment snapshot for testing."""
    return {"BASE_URL": "https://api.test", "TOKEN": "abc"}


@pytest.fixture(scope="module")
def client():
    """Create test client with the mocked network."""
    app.dependency_overrides[get_transport] = override_get_transport
    app.dependency_overrides[get_environment] = override_get_environment
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _collection(items, auth=None):
    collection = {"info": {"name": "API smoke"}, "item": items}
    if auth is not None:
        collection["auth"] = auth
    return collection


def _item(name, path):
    return {"name": name, "request": {"method": "GET", "url": {"raw": "{{BASE_URL}}" + path}}}


class TestServiceEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "Collection Runner"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestRunCollection:

    def test_runs_collection_in_order(self, client):
        collection = _collection(
            [
                _item("first", "/one"),
                {"name": "folder", "item": [_item("second", "/down"), _item("third", "/three")]},
            ],
            auth={"type": "bearer", "bearer": [{"key": "token", "value": "{{TOKEN}}"}]},
        )

        response = client.post("/api/runs", json={"collection": collection})

        assert response.status_code == 200
        data = response.json()
        assert data["collection_name"] == "API smoke"
        assert [r["name"] for r in data["results"]] == ["first", "second", "third"]
        assert [r["outcome"]["kind"] for r in data["results"]] == ["success", "failure", "success"]
        assert '"authorization":"Bearer abc"' in data["results"][0]["outcome"]["body"].replace(" ", "")
        assert data["results"][1]["outcome"]["status_code"] is None
        assert data["summary"]["total_requests"] == 3
        assert data["summary"]["success_count"] == 2
        assert data["summary"]["failure_count"] == 1
        assert data["warnings"] == []

    def test_http_error_is_failure_by_default(self, client):
        response = client.post("/api/runs", json={"collection": _collection([_item("gone", "/missing")])})

        result = response.json()["results"][0]
        assert result["outcome"]["kind"] == "failure"
        assert result["outcome"]["status_code"] == 404
        assert result["outcome"]["body"] == "not found"

    def test_http_error_can_be_allowed_per_run(self, client):
        response = client.post("/api/runs", json={
            "collection": _collection([_item("gone", "/missing")]),
            "fail_on_http_error": False,
        })

        result = response.json()["results"][0]
        assert result["outcome"] == {"kind": "success", "status_code": 404, "body": "not found"}

    def test_body_variables_override_environment(self, client):
        response = client.post("/api/runs", json={
            "collection": _collection([_item("override", "/one")]),
            "variables": {"BASE_URL": "https://other.test"},
        })

        assert response.json()["results"][0]["url"] == "https://other.test/one"

    def test_variable_values_are_json_escaped(self, client):
        note = "say \"hi\"\n\tbye"
        collection = _collection([{"name": "echo", "request": {
            "method": "POST",
            "url": "{{BASE_URL}}/echo",
            "body": {"mode": "raw", "raw": "{\"note\": \"{{NOTE}}\"}"},
        }}])

        response = client.post("/api/runs", json={"collection": collection, "variables": {"NOTE": note}})

        assert response.status_code == 200
        result = response.json()["results"][0]
        assert result["outcome"]["kind"] == "success"
        assert result["outcome"]["body"] == "{\"note\": \"" + note + "\"}"

    def test_http_error_override_is_skipped_for_other_transports(self, client, caplog):
        class StaticTransport:
            async def send(self, request):
                return TransportResponse(500, "static")

        app.dependency_overrides[get_transport] = StaticTransport
        caplog.set_level(logging.DEBUG, logger="collection_runner.routers.runs")
        try:
            response = client.post("/api/runs", json={
                "collection": _collection([_item("static", "/one")]),
                "fail_on_http_error": True,
            })
        finally:
            app.dependency_overrides[get_transport] = override_get_transport

        assert response.json()["results"][0]["outcome"] == {"kind": "success", "status_code": 500, "body": "static"}
        assert "Ignoring fail_on_http_error=True for transport StaticTransport" in caplog.text

    def test_missing_variables_are_reported(self, client):
        collection = _collection([{"name": "x", "request": {"method": "GET", "url": "{{BASE_URL}}/{{UNSET}}"}}])

        response = client.post("/api/runs", json={"collection": collection})

        assert response.json()["warnings"] == ["Environment variable not found: UNSET"]

    def test_empty_collection(self, client):
        response = client.post("/api/runs", json={"collection": _collection([])})

        data = response.json()
        assert data["results"] == []
        assert data["summary"]["total_requests"] == 0
        assert data["summary"]["average_success_millis"] == 0


class TestErrorResponses:

    def test_invalid_collection_is_400(self, client):
        response = client.post("/api/runs", json={"collection": {"item": []}})

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Invalid Postman collection format.",
            "error_code": "INVALID_COLLECTION",
        }

    def test_malformed_request_item_is_400(self, client):
        collection = {"info": {"name": "c"}, "item": [{"name": "bad", "request": [1, 2]}]}

        response = client.post("/api/runs", json={"collection": collection})

        assert response.status_code == 400
        assert response.json() == {
            "detail": "Invalid request in item 'bad'",
            "error_code": "INVALID_COLLECTION",
        }

    def test_missing_collection_is_422(self, client):
        response = client.post("/api/runs", json={})

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "collection" in data["detail"]
