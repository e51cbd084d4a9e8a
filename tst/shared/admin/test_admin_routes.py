"""HTTP tests for /admin-api and the raw site mode record."""

import pytest

from src.shared.auth import auth
from src.shared.site_mode.store import FileSiteModeStore, SiteMode, get_site_mode_store


def get_mode(client):
    response = client.get("/admin-api?action=get_mode")
    assert response.status_code == 200
    return response.json()["mode"]


def set_mode(client, mode):
    return client.post("/admin-api?action=set_mode", json={"mode": mode})


def test_default_mode_is_public(client):
    assert get_mode(client) == "group_only"


def test_get_mode_is_idempotent(client):
    assert {get_mode(client) for _ in range(3)} == {"group_only"}


@pytest.mark.parametrize("mode", ["full_access", "group_only"])
def test_set_then_get(admin_client, mode):
    response = set_mode(admin_client, mode)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "mode": mode,
        "message": f"Site mode updated to: {mode}",
    }
    assert get_mode(admin_client) == mode


def test_set_mode_requires_login(client, store):
    response = set_mode(client, "full_access")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}
    assert store.get() is SiteMode.GROUP_ONLY


def test_set_mode_after_logout_is_rejected(admin_client, store):
    admin_client.get("/admin-auth?action=logout")

    assert set_mode(admin_client, "full_access").status_code == 401
    assert store.get() is SiteMode.GROUP_ONLY


def test_expired_session_cannot_set_mode(admin_client, store, monkeypatch, clock):
    clock.advance(14401)
    monkeypatch.setattr(auth, "time", clock)

    assert admin_client.get("/admin-auth?action=check").json() == {"authenticated": False}
    assert set_mode(admin_client, "full_access").status_code == 401
    assert store.get() is SiteMode.GROUP_ONLY


@pytest.mark.parametrize("body", [{"mode": "everyone"}, {"mode": ["full_access"]}, {}])
def test_invalid_mode(admin_client, store, body):
    response = admin_client.post("/admin-api?action=set_mode", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid mode. Use group_only or full_access."}
    assert store.get() is SiteMode.GROUP_ONLY


def test_set_mode_requires_post(admin_client):
    response = admin_client.get("/admin-api?action=set_mode")
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown action"}


def test_storage_failure(admin_client, tmp_path):
    from src.app import app

    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    app.dependency_overrides[get_site_mode_store] = lambda: FileSiteModeStore(str(blocker / "site-mode.json"))

    response = set_mode(admin_client, "full_access")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error == "Failed to update mode. Check file permissions."
    assert str(tmp_path) not in error


def test_set_mode_creates_data_directory(admin_client, store):
    set_mode(admin_client, "full_access")
    with open(store.path) as f:
        assert '"full_access"' in f.read()


def test_raw_record(admin_client):
    empty = admin_client.get("/admin/data/site-mode.json").json()
    assert empty == {"mode": "group_only", "updated_at": None, "updated_by": None}

    set_mode(admin_client, "full_access")
    record = admin_client.get("/admin/data/site-mode.json").json()
    assert record["mode"] == "full_access"
    assert record["updated_by"] == "admin"
    assert record["updated_at"]


def test_preflight(client):
    response = client.options(
        "/admin-api",
        headers={"Origin": "https://themahalaxmigroup.com", "Access-Control-Request-Method": "POST"}
    )
    assert response.status_code == 204
    assert response.headers["Access-Control-Allow-Origin"] == "https://themahalaxmigroup.com"


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
