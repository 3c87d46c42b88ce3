# tests/api/test_health_api.py
from __future__ import annotations

from tests.helpers.utils import problem


def test_health_ok_without_redis(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert (body["status"], body["db"], body["redis"]) == ("ok", "ok", "disabled")
    assert resp.headers["X-Request-ID"]


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope", headers={"X-Request-ID": "rid-1"})
    assert resp.status_code == 404
    body = problem(resp)
    assert body["code"] == "not_found"
    assert body["request_id"] == "rid-1"
    assert body["instance"] == "/api/v1/nope"


def test_wrong_method_is_405(client):
    resp = client.put("/api/v1/health")
    assert resp.status_code == 405
    assert problem(resp)["code"] == "method_not_allowed"
