# tests/api/test_projects_api.py
from __future__ import annotations

import pytest

from tests.helpers.utils import bearer, problem, register

API = "/api/v1/projects"


@pytest.fixture()
def alice(client):
    data = register(client, email="alice@example.com", username="alice")
    return {"id": data["user"]["id"], "headers": bearer(data["tokens"]["access_token"])}


@pytest.fixture()
def bob(client):
    data = register(client, email="bob@example.com", username="bob")
    return {"id": data["user"]["id"], "headers": bearer(data["tokens"]["access_token"])}


def _create(client, who, **payload):
    body = {"key": "WEB", "name": "Website", **payload}
    return client.post(API, json=body, headers=who["headers"])


def test_create_and_duplicate_key(client, alice, bob):
    resp = _create(client, alice)
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["user_role"] == "owner"
    assert data["owner"]["username"] == "alice"
    assert data["member_count"] == 0

    dup = _create(client, bob, name="Other website")
    assert dup.status_code == 409
    body = problem(dup)
    assert body["code"] == "duplicate_identity"
    assert body["details"] == {"field": "key"}


def test_invalid_key_is_422(client, alice):
    resp = _create(client, alice, key="web")
    assert resp.status_code == 422
    assert "key" in problem(resp)["details"]["errors"]


def test_member_lifecycle(client, alice, bob):
    project_id = _create(client, alice).get_json()["data"]["id"]

    # Private project is invisible to bob
    assert client.get(f"{API}/{project_id}", headers=bob["headers"]).status_code == 404

    added = client.post(
        f"{API}/{project_id}/members", json={"user_id": bob["id"]}, headers=alice["headers"]
    )
    assert added.status_code == 201
    membership = added.get_json()["data"]
    assert membership["role"] == "member"
    assert membership["user"]["username"] == "bob"

    edited = client.patch(
        f"{API}/{project_id}", json={"description": "Edited by bob"}, headers=bob["headers"]
    )
    assert edited.status_code == 200
    assert edited.get_json()["data"]["user_role"] == "member"

    denied = client.delete(f"{API}/{project_id}", headers=bob["headers"])
    assert denied.status_code == 403
    assert problem(denied)["code"] == "permission_denied"

    removed = client.delete(
        f"{API}/{project_id}/members/{membership['id']}", headers=alice["headers"]
    )
    assert removed.status_code == 204

    gone = client.get(f"{API}/{project_id}", headers=bob["headers"])
    assert gone.status_code == 404
    assert problem(gone)["code"] == "not_found"


def test_owner_role_cannot_be_assigned(client, alice, bob):
    project_id = _create(client, alice).get_json()["data"]["id"]
    resp = client.post(
        f"{API}/{project_id}/members",
        json={"user_id": bob["id"], "role": "owner"},
        headers=alice["headers"],
    )
    assert resp.status_code == 422


def test_adding_twice_conflicts(client, alice, bob):
    project_id = _create(client, alice).get_json()["data"]["id"]
    url = f"{API}/{project_id}/members"
    assert client.post(url, json={"user_id": bob["id"]}, headers=alice["headers"]).status_code == 201

    resp = client.post(url, json={"user_id": bob["id"]}, headers=alice["headers"])
    assert resp.status_code == 409
    assert problem(resp)["code"] == "already_member"


def test_promote_and_list_members(client, alice, bob):
    project_id = _create(client, alice).get_json()["data"]["id"]
    member = client.post(
        f"{API}/{project_id}/members",
        json={"user_id": bob["id"], "role": "viewer"},
        headers=alice["headers"],
    ).get_json()["data"]

    promoted = client.patch(
        f"{API}/{project_id}/members/{member['id']}",
        json={"role": "admin"},
        headers=alice["headers"],
    )
    assert promoted.status_code == 200
    assert promoted.get_json()["data"]["role"] == "admin"

    listed = client.get(f"{API}/{project_id}/members", headers=bob["headers"])
    assert [m["role"] for m in listed.get_json()["data"]] == ["admin"]


def test_search_envelope(client, alice, bob):
    _create(client, alice, key="PUB", name="Public board", is_public=True)
    _create(client, alice, key="PRIV", name="Private board")

    resp = client.get(f"{API}?query=board&limit=10", headers=bob["headers"])

    assert resp.status_code == 200
    body = resp.get_json()
    assert [p["key"] for p in body["data"]] == ["PUB"]
    assert body["data"][0]["user_role"] == "viewer"
    assert body["meta"] == {"total": 1, "page": 1, "limit": 10, "total_pages": 1}


def test_search_rejects_oversized_limit(client, alice):
    resp = client.get(f"{API}?limit=1000", headers=alice["headers"])
    assert resp.status_code == 422


def test_delete_by_owner(client, alice):
    project_id = _create(client, alice).get_json()["data"]["id"]
    assert client.delete(f"{API}/{project_id}", headers=alice["headers"]).status_code == 204
    assert client.get(f"{API}/{project_id}", headers=alice["headers"]).status_code == 404


def test_requires_authentication(client):
    resp = client.get(API)
    assert resp.status_code == 401
    assert problem(resp)["code"] == "unauthorized"
