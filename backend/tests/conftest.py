import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lostfound import create_app  # noqa: E402
from lostfound.extensions import db  # noqa: E402

ADMIN_PASSWORD = "test-password-123"

ITEM_FIELDS = {
    "title": "Blue Backpack",
    "description": "Navy blue backpack with a laptop sleeve",
    "category": "Bags",
    "location_found": "Library",
    "date_found": "2025-01-10",
    "reporter_name": "A",
    "reporter_email": "a@x.com",
}

CLAIM_FIELDS = {
    "claimant_name": "Sam Owner",
    "claimant_email": "sam@example.edu",
    "student_id": "S12345",
    "message": "It has my name tag inside the front pocket.",
}

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 256


def build_test_app(tmp_path, **overrides):
    config = {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "ADMIN_USERNAME": "admin",
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
    }
    config.update(overrides)
    return create_app("testing", config)


@pytest.fixture()
def app(tmp_path):
    app = build_test_app(tmp_path)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_client(app):
    c = app.test_client()
    resp = c.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return c


@pytest.fixture()
def upload_dir(app):
    return Path(app.config["UPLOAD_FOLDER"])


def image(data: bytes = PNG_BYTES, name: str = "photo.png", mimetype: str = "image/png"):
    return (io.BytesIO(data), name, mimetype)


def submit_item(client, photo=None, **fields):
    data = dict(ITEM_FIELDS)
    data.update(fields)
    if photo is not None:
        data["photo"] = photo
    return client.post("/api/items", data=data, content_type="multipart/form-data")


def submit_claim(client, item_id, proof=None, **fields):
    data = dict(CLAIM_FIELDS)
    data.update(fields)
    if proof is not None:
        data["proof"] = proof
    return client.post(f"/api/items/{item_id}/claim", data=data, content_type="multipart/form-data")


def admin_action(admin_client, item_id, action, **payload):
    body = {"action": action}
    body.update(payload)
    return admin_client.patch(f"/api/admin/items/{item_id}", json=body)


def create_approved_item(client, admin_client, **fields) -> int:
    resp = submit_item(client, **fields)
    assert resp.status_code == 201
    item_id = resp.get_json()["id"]
    assert admin_action(admin_client, item_id, "approve").status_code == 200
    return item_id
