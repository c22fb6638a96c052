from sqlalchemy import inspect

from lostfound import create_app
from lostfound.extensions import db
from lostfound.models import User

from conftest import admin_action, build_test_app, create_approved_item, submit_claim, submit_item


def test_create_app_accepts_config_overrides(tmp_path):
    app = build_test_app(tmp_path, SESSION_IDLE_SECONDS=60, RATE_LIMIT_PER_WINDOW=7)
    assert app.config["TESTING"] is True
    assert app.config["UPLOAD_MAX_BYTES"] == 5 * 1024 * 1024
    assert app.extensions["session_store"].idle_seconds == 60
    assert app.extensions["rate_limiter"].limit == 7


def test_admin_user_is_seeded_once(tmp_path):
    app = build_test_app(tmp_path)
    build_test_app(tmp_path)  # second start on the same database
    with app.app_context():
        users = db.session.query(User).all()
        assert [(u.username, u.role) for u in users] == [("admin", "admin")]
        assert users[0].password_hash != "test-password-123"


def test_schema_creation_can_be_disabled(tmp_path):
    app = create_app("testing", {"AUTO_CREATE_SCHEMA": False, "UPLOAD_FOLDER": str(tmp_path / "u")})
    with app.app_context():
        assert not inspect(db.engine).has_table("items")


def test_health_endpoints(client):
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/api/health").get_json() == {"ok": True}
    assert client.get("/db-check").get_json() == {"db": "ok"}


def test_security_headers_present(client):
    resp = client.get("/api/items")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_unknown_route_returns_json_404(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_stats_counts_items_and_claims(client, admin_client):
    approved = create_approved_item(client, admin_client)
    claimed = create_approved_item(client, admin_client)
    admin_action(admin_client, claimed, "mark_claimed")
    submit_item(client)
    submit_claim(client, approved)
    c2 = submit_claim(client, approved).get_json()["id"]
    admin_client.patch(f"/api/admin/claims/{c2}", json={"status": "resolved"})

    stats = admin_client.get("/api/admin/stats").get_json()
    assert stats["items"] == {"pending": 1, "approved": 1, "claimed": 1, "archived": 0, "total": 3}
    assert stats["claims"]["total"] == 2
    assert stats["claims"]["new"] == 1
    assert stats["claims"]["resolved"] == 1


def test_internal_errors_do_not_leak_details(app, client, monkeypatch):
    from lostfound.modules.items import service

    def boom(*args, **kwargs):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr(service, "search_items", boom)
    resp = client.get("/api/items")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}


def test_request_over_content_length_is_json_413(tmp_path):
    app = build_test_app(tmp_path, MAX_CONTENT_LENGTH=1024)
    client = app.test_client()
    resp = client.post("/api/items", data={"title": "x" * 4096})
    assert resp.status_code == 413
    assert "error" in resp.get_json()
