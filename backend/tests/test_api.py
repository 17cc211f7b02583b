"""
Tests for the HTTP endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from crudgen.api.deps import get_oracle, get_skip_parameters, get_value_cache
from crudgen.core.config import settings
from crudgen.main import app
from crudgen.services.skip_params import SkipParameters
from crudgen.services.value_cache import ValueCache


@pytest.fixture
def client():
    cache = ValueCache(ttl_seconds=3600)
    app.dependency_overrides[get_value_cache] = lambda: cache
    app.dependency_overrides[get_oracle] = lambda: None
    app.dependency_overrides[get_skip_parameters] = lambda: SkipParameters(request_body={"nickname"})
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_metrics(client):
    client.get("/health")
    response = client.get("/metrics")
    
    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_list_operations(client, user_spec):
    response = client.post("/api/v1/test-data/operations", json={"openapi_spec": user_spec})
    
    assert response.status_code == 200
    operations = response.json()["operations"]
    assert {"path": "/users", "method": "POST", "operation_id": "createUser", "summary": ""} in operations
    assert len(operations) == 4


def test_generate(client, user_spec):
    response = client.post("/api/v1/test-data/generate", json={
        "openapi_spec": user_spec,
        "path": "/users",
        "method": "post",
        "count": 3,
    })
    
    assert response.status_code == 200
    cases = response.json()["testData"]
    assert len(cases) == 3
    assert len({case["requestBody"]["email"] for case in cases}) == 3
    assert all("nickname" not in case["requestBody"] for case in cases)


def test_generate_with_base_data(client, user_spec):
    base = {"requestBody": {"email": "seed@example.com", "name": "Seed", "role": "admin", "age": 40}}
    
    response = client.post("/api/v1/test-data/generate", json={
        "openapi_spec": user_spec, "path": "/users", "method": "POST", "base_data": base,
    })
    
    assert response.status_code == 200
    assert response.json()["testData"][0]["requestBody"] == base["requestBody"]


def test_generate_unknown_operation(client, user_spec):
    response = client.post("/api/v1/test-data/generate", json={
        "openapi_spec": user_spec, "path": "/nowhere", "method": "GET",
    })
    
    assert response.status_code == 404
    assert response.json()["detail"] == "Operation not found: GET /nowhere"


def test_generate_invalid_spec(client):
    response = client.post("/api/v1/test-data/generate", json={
        "openapi_spec": {"openapi": "3.0.3", "paths": {}}, "path": "/users", "method": "GET",
    })
    
    assert response.status_code == 400
    assert "Invalid OpenAPI specification" in response.json()["detail"]


def test_generate_count_bounds(client, user_spec):
    response = client.post("/api/v1/test-data/generate", json={
        "openapi_spec": user_spec, "path": "/users", "method": "POST", "count": 0,
    })
    
    assert response.status_code == 422


def test_generate_reports_violations(client, user_spec):
    """Exhausted retries answer 422 naming the failing field."""
    spec = dict(user_spec)
    spec["paths"] = {
        "/tags": {
            "post": {
                "requestBody": {"content": {"application/json": {"schema": {
                    "type": "object", "required": ["tags"], "properties": {"tags": {"type": "array"}},
                }}}},
                "responses": {"201": {"description": "Created"}},
            }
        }
    }
    
    response = client.post("/api/v1/test-data/generate", json={
        "openapi_spec": spec, "path": "/tags", "method": "POST",
    })
    
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["operation"] == "POST /tags"
    assert detail["violations"] == ["testData[0].requestBody.tags: missing required field"]


def test_suite(client, user_spec):
    response = client.post("/api/v1/test-data/suite", json={
        "openapi_spec": user_spec,
        "operations": [{"path": "/users/{userId}", "method": "get"}, {"path": "/users", "method": "post"}],
        "count": 2,
        "format": "csv",
    })
    
    assert response.status_code == 200
    body = response.json()
    assert set(body["batches"]) == {"GET_users_{userId}.csv", "POST_users.csv"}
    assert body["errors"] == {}
    assert "files" not in body


def test_suite_saves_files(client, user_spec, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "TEST_DATA_DIR", str(tmp_path))
    
    response = client.post("/api/v1/test-data/suite", json={
        "openapi_spec": user_spec,
        "operations": [{"path": "/users", "method": "POST"}],
        "save": True,
    })
    
    assert response.status_code == 200
    assert response.json()["files"] == [str(tmp_path / "POST_users.json")]
    assert (tmp_path / "POST_users.json").exists()


def test_suite_rejects_unknown_format(client, user_spec):
    response = client.post("/api/v1/test-data/suite", json={"openapi_spec": user_spec, "format": "xml"})
    
    assert response.status_code == 400
