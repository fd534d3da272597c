"""
Where: gqlhttp/gateway/tests/test_graphql_route.py
What: End-to-end tests for the GraphQL endpoint through FastAPI.
Why: Verify body parsing, error mapping and GraphiQL negotiation together.
"""

import gzip
import json

import pytest
from fastapi.testclient import TestClient

from gqlhttp.gateway.api.deps import get_executor_client
from gqlhttp.gateway.core.exceptions import ExecutorUnavailableError
from gqlhttp.gateway.core.executor import ExecutionResult
from gqlhttp.gateway.main import app


class FakeExecutor:
    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result or ExecutionResult(200, {"data": {"x": 1}})
        self.error = error

    async def execute(self, params, headers=None):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def client(executor):
    app.dependency_overrides[get_executor_client] = lambda: executor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_post_json_query(client, executor):
    response = client.post(
        "/graphql",
        content=b'{"query":"{ x }","variables":{"a":1},"operationName":"Op"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {"data": {"x": 1}}
    params = executor.calls[0]
    assert params.query == "{ x }"
    assert params.variables == {"a": 1}
    assert params.operation_name == "Op"


def test_post_graphql_body(client, executor):
    response = client.post(
        "/graphql", content=b"{ x }", headers={"Content-Type": "application/graphql"}
    )

    assert response.status_code == 200
    assert executor.calls[0].query == "{ x }"


def test_post_form_body(client, executor):
    response = client.post(
        "/graphql",
        content=b"query=%7B+x+%7D&variables=%7B%22a%22%3A1%7D",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    assert executor.calls[0].query == "{ x }"
    assert executor.calls[0].variables == {"a": 1}


def test_post_gzip_json(client, executor):
    response = client.post(
        "/graphql",
        content=gzip.compress(json.dumps({"query": "{ x }"}).encode()),
        headers={"Content-Type": "application/json", "Content-Encoding": "gzip"},
    )

    assert response.status_code == 200
    assert executor.calls[0].query == "{ x }"


def test_get_query_string(client, executor):
    response = client.get("/graphql", params={"query": "{ x }", "variables": '{"id": "7"}'})

    assert response.status_code == 200
    assert executor.calls[0].variables == {"id": "7"}


def test_url_query_overrides_body(client, executor):
    response = client.post(
        "/graphql?query=%7B+url+%7D",
        content=b'{"query":"{ body }"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert executor.calls[0].query == "{ url }"


def test_invalid_json_body(client, executor):
    response = client.post(
        "/graphql", content=b"  not-json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"errors": [{"message": "POST body sent invalid JSON."}]}
    assert executor.calls == []


def test_unsupported_charset(client):
    response = client.post(
        "/graphql",
        content=b'{"query":"{ x }"}',
        headers={"Content-Type": "application/json; charset=ascii"},
    )

    assert response.status_code == 415
    assert response.json()["errors"][0]["message"] == 'Unsupported charset "ASCII".'


def test_unsupported_encoding(client):
    response = client.post(
        "/graphql",
        content=b'{"query":"{ x }"}',
        headers={"Content-Type": "application/json", "Content-Encoding": "br"},
    )

    assert response.status_code == 415
    assert response.json()["errors"][0]["message"] == 'Unsupported content-encoding "br".'


def test_malformed_gzip(client):
    response = client.post(
        "/graphql",
        content=b"not gzip at all",
        headers={"Content-Type": "application/json", "Content-Encoding": "gzip"},
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"].startswith("Invalid body: ")


def test_payload_too_large(client, monkeypatch):
    from gqlhttp.gateway.config import config

    monkeypatch.setattr(config, "MAX_BODY_BYTES", 16)
    response = client.post(
        "/graphql",
        content=b'{"query":"{ a_long_field_name }"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json()["errors"][0]["message"] == "Invalid body: request entity too large."


def test_missing_query(client, executor):
    response = client.post("/graphql", content=b"{}", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Must provide query string."
    assert executor.calls == []


def test_no_content_type_means_no_body(client):
    response = client.post("/graphql", content=b'{"query":"{ x }"}')

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Must provide query string."


def test_invalid_variables(client):
    response = client.get("/graphql", params={"query": "{ x }", "variables": "[1]"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Variables are invalid JSON."


def test_executor_status_is_passed_through(client, executor):
    executor.result = ExecutionResult(400, {"errors": [{"message": "Cannot query field"}]})

    response = client.get("/graphql", params={"query": "{ nope }"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == "Cannot query field"


def test_executor_unavailable(client, executor):
    executor.error = ExecutorUnavailableError(ConnectionError("refused"))

    response = client.get("/graphql", params={"query": "{ x }"})

    assert response.status_code == 502
    assert response.json() == {"errors": [{"message": "Bad Gateway"}]}


@pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "OPTIONS"])
def test_method_not_allowed(client, executor, method):
    response = client.request(method, "/graphql", content=b"{}")

    assert response.status_code == 405
    assert response.headers["allow"] == "GET, POST"
    assert response.json() == {"message": "Method Not Allowed"}
    assert executor.calls == []


def test_head_is_not_allowed(client):
    response = client.head("/graphql")

    assert response.status_code == 405
    assert response.headers["allow"] == "GET, POST"


def test_browser_get_without_query_renders_graphiql(client, executor):
    response = client.get("/graphql", headers={"Accept": "text/html"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<title>GraphiQL</title>" in response.text
    assert executor.calls == []


def test_browser_get_with_query_renders_result(client, executor):
    response = client.get(
        "/graphql", params={"query": "{ x }"}, headers={"Accept": "text/html"}
    )

    assert response.status_code == 200
    assert "<title>GraphiQL</title>" in response.text
    assert 'query: "{ x }",' in response.text
    assert len(executor.calls) == 1


def test_raw_param_disables_graphiql(client):
    response = client.get(
        "/graphql", params={"query": "{ x }", "raw": ""}, headers={"Accept": "text/html"}
    )

    assert response.status_code == 200
    assert response.json() == {"data": {"x": 1}}


def test_post_never_renders_graphiql(client):
    response = client.post(
        "/graphql",
        content=b'{"query":"{ x }"}',
        headers={"Content-Type": "application/json", "Accept": "text/html"},
    )

    assert response.json() == {"data": {"x": 1}}


def test_response_carries_request_id(client):
    response = client.get("/health", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"
