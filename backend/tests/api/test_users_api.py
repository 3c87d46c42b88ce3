# tests/api/test_users_api.py
from __future__ import annotations

from tests.helpers.utils import STRONG_PASSWORD, bearer, problem, register


def test_patch_me_updates_preferences(client):
    tokens = register(client, email="p@example.com", username="prefs")["tokens"]

    resp = client.patch(
        "/api/v1/users/me",
        json={"theme": "high-contrast", "font_size": "large", "keyboard_nav_only": True},
        headers=bearer(tokens["access_token"]),
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert (data["theme"], data["font_size"], data["keyboard_nav_only"]) == (
        "high-contrast",
        "large",
        True,
    )


def test_patch_me_rejects_unknown_theme(client):
    tokens = register(client, email="t@example.com", username="themer")["tokens"]
    resp = client.patch(
        "/api/v1/users/me", json={"theme": "neon"}, headers=bearer(tokens["access_token"])
    )
    assert resp.status_code == 422
    assert "theme" in problem(resp)["details"]["errors"]


def test_change_password_ends_every_session(client):
    first = register(client, email="c@example.com", username="changer")["tokens"]
    second = client.post(
        "/api/v1/auth/login", json={"email": "c@example.com", "password": STRONG_PASSWORD}
    ).get_json()["data"]["tokens"]

    resp = client.post(
        "/api/v1/users/me/password",
        json={"current_password": STRONG_PASSWORD, "new_password": "Brand!N3w"},
        headers=bearer(first["access_token"]),
    )
    assert resp.status_code == 204

    for pair in (first, second):
        again = client.post("/api/v1/auth/refresh", json={"refresh_token": pair["refresh_token"]})
        assert again.status_code == 401

    old = client.post("/api/v1/auth/login", json={"email": "c@example.com", "password": STRONG_PASSWORD})
    assert old.status_code == 401
    new = client.post("/api/v1/auth/login", json={"email": "c@example.com", "password": "Brand!N3w"})
    assert new.status_code == 200


def test_change_password_wrong_current(client):
    tokens = register(client, email="w@example.com", username="wrongcur")["tokens"]
    resp = client.post(
        "/api/v1/users/me/password",
        json={"current_password": "Nope!1234", "new_password": "Brand!N3w"},
        headers=bearer(tokens["access_token"]),
    )
    assert resp.status_code == 401
    assert problem(resp)["code"] == "invalid_credentials"
