import os

import pytest

from lostfound.extensions import db
from lostfound.models import Claim, Item
from lostfound.uploads import UploadStore

from conftest import admin_action, create_approved_item, image, submit_claim, submit_item

SIX_MIB = 6 * 1024 * 1024


def _item_count(app):
    with app.app_context():
        return db.session.query(Item).count()


def test_photo_is_stored_under_generated_name(client, upload_dir):
    resp = submit_item(client, photo=image(name="../../etc/My Photo.JPG", mimetype="image/jpeg"))
    assert resp.status_code == 201
    stored = os.listdir(upload_dir)
    assert len(stored) == 1
    name = stored[0]
    assert name.endswith(".jpg")
    assert "My Photo" not in name
    assert len(name) == 32 + len(".jpg")


def test_oversized_upload_is_rejected_before_insert(app, client, upload_dir):
    resp = submit_item(client, photo=image(data=b"\x00" * SIX_MIB))
    assert resp.status_code == 413
    assert _item_count(app) == 0
    assert os.listdir(upload_dir) == []


def test_wrong_type_upload_is_rejected(app, client, upload_dir):
    resp = submit_item(client, photo=image(name="notes.gif", mimetype="image/gif"))
    assert resp.status_code == 415
    assert _item_count(app) == 0
    assert os.listdir(upload_dir) == []


def test_photo_removed_when_validation_fails(app, client, upload_dir):
    resp = submit_item(client, photo=image(), title="")
    assert resp.status_code == 400
    assert _item_count(app) == 0
    assert os.listdir(upload_dir) == []


def test_proof_removed_when_claim_validation_fails(client, admin_client, upload_dir):
    item_id = create_approved_item(client, admin_client)
    resp = submit_claim(client, item_id, proof=image(), message="   ")
    assert resp.status_code == 400
    assert os.listdir(upload_dir) == []


def test_proof_removed_when_item_is_archived(client, admin_client, upload_dir):
    item_id = create_approved_item(client, admin_client)
    admin_action(admin_client, item_id, "archive")
    resp = submit_claim(client, item_id, proof=image())
    assert resp.status_code == 404
    assert os.listdir(upload_dir) == []


def test_delete_removes_item_claims_and_files(app, client, admin_client, upload_dir):
    item_id = submit_item(client, photo=image()).get_json()["id"]
    admin_action(admin_client, item_id, "approve")
    assert submit_claim(client, item_id, proof=image(name="a.webp", mimetype="image/webp")).status_code == 201
    assert submit_claim(client, item_id).status_code == 201
    assert submit_claim(client, item_id, proof=image(name="b.jpeg", mimetype="image/jpeg")).status_code == 201
    assert len(os.listdir(upload_dir)) == 3

    resp = admin_client.delete(f"/api/admin/items/{item_id}")
    assert resp.status_code == 200

    assert os.listdir(upload_dir) == []
    with app.app_context():
        assert db.session.get(Item, item_id) is None
        assert db.session.query(Claim).filter_by(item_id=item_id).count() == 0
    assert admin_client.get(f"/api/items/{item_id}").status_code == 404


def test_delete_tolerates_missing_files(app, client, admin_client, upload_dir):
    item_id = submit_item(client, photo=image()).get_json()["id"]
    for name in os.listdir(upload_dir):
        os.remove(upload_dir / name)

    resp = admin_client.delete(f"/api/admin/items/{item_id}")
    assert resp.status_code == 200
    assert _item_count(app) == 0


def test_delete_unknown_item_is_not_found(admin_client):
    assert admin_client.delete("/api/admin/items/31337").status_code == 404


def test_store_delete_is_best_effort(app, tmp_path):
    store = UploadStore(str(tmp_path / "files"), 1024, ["image/png"])
    with app.app_context():
        assert store.delete("does-not-exist.png") is False
        assert store.delete(None) is False


def test_staged_discards_file_on_error(app, tmp_path):
    from werkzeug.datastructures import FileStorage
    import io

    root = tmp_path / "staged"
    store = UploadStore(str(root), 1024, ["image/png"])
    upload = FileStorage(stream=io.BytesIO(b"png"), filename="x.png", content_type="image/png")
    with app.app_context():
        with pytest.raises(RuntimeError):
            with store.staged(upload) as name:
                assert (root / name).exists()
                raise RuntimeError("insert failed")
    assert os.listdir(root) == []


def test_uploads_route_rejects_unknown_names(client):
    assert client.get("/uploads/nope.png").status_code == 404
    assert client.get("/uploads/../config.py").status_code == 404
