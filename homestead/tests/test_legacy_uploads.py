import pytest
from fastapi import HTTPException

from homestead.config import settings
from homestead.models.image_records import PropertyImage, StorageType, UnitImage
from homestead.services.legacy_uploads import resolve_upload_path


@pytest.fixture()
def uploads(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOADS_DIR", str(tmp_path))
    return tmp_path


def test_serves_legacy_upload(client, uploads):
    (uploads / "old.png").write_bytes(b"png")
    r = client.get("/uploads/old.png")
    assert r.status_code == 200
    assert r.content == b"png"
    assert r.headers["content-type"] == "image/png"


def test_missing_upload_is_404(client, uploads):
    assert client.get("/uploads/nope.jpg").status_code == 404


def test_path_traversal_is_rejected(client, uploads, tmp_path_factory):
    outside = tmp_path_factory.mktemp("outside") / "secret.jpg"
    outside.write_bytes(b"secret")
    r = client.get(f"/uploads/..%2F{outside.parent.name}%2Fsecret.jpg")
    assert r.status_code in (400, 404)
    assert r.content != b"secret"


def test_migrate_uploads_rewrites_records(
    client, db_session, object_store, uploads, make_property, make_unit
):
    (uploads / "front.jpg").write_bytes(b"front")
    (uploads / "notes.txt").write_bytes(b"skip me")
    prop = make_property()
    unit = make_unit(prop=prop)
    prop_image = PropertyImage(
        property_id=prop.id, url="/uploads/front.jpg", storage_type=StorageType.EXTERNAL
    )
    unit_image = UnitImage(
        unit_id=unit.id, url="/uploads/front.jpg", storage_type=StorageType.EXTERNAL
    )
    untouched = PropertyImage(
        property_id=prop.id, url="https://x.io/a.jpg", storage_type=StorageType.EXTERNAL
    )
    db_session.add_all([prop_image, unit_image, untouched])
    db_session.commit()

    r = client.post("/api/admin/migrate-uploads")
    assert r.status_code == 200, r.text
    (entry,) = r.json()
    assert entry["filename"] == "front.jpg"
    assert entry["status"] == "migrated"
    assert entry["updated_records"] == 2

    key = entry["object_key"]
    assert object_store.objects[key] == b"front"

    db_session.expire_all()
    for image in (db_session.get(PropertyImage, prop_image.id), db_session.get(UnitImage, unit_image.id)):
        assert image.object_key == key
        assert image.storage_type == StorageType.OBJECT_STORAGE
        assert image.url == "/api/images/" + key.replace("/", "%2F")
    assert db_session.get(PropertyImage, untouched.id).url == "https://x.io/a.jpg"

    assert client.get(f"/api/images/{key}").content == b"front"


def test_failed_migration_leaves_records_alone(
    client, db_session, object_store, uploads, make_property
):
    (uploads / "back.jpg").write_bytes(b"back")
    prop = make_property()
    image = PropertyImage(
        property_id=prop.id, url="/uploads/back.jpg", storage_type=StorageType.EXTERNAL
    )
    db_session.add(image)
    db_session.commit()
    object_store.fail_uploads = True

    r = client.post("/api/admin/migrate-uploads")
    assert r.json() == [
        {"filename": "back.jpg", "object_key": None, "updated_records": 0, "status": "failed"}
    ]
    db_session.expire_all()
    assert db_session.get(PropertyImage, image.id).url == "/uploads/back.jpg"


def test_resolve_upload_path_refuses_escapes(uploads):
    (uploads / "ok.jpg").write_bytes(b"ok")
    assert resolve_upload_path("ok.jpg") == str(uploads / "ok.jpg")
    for name in ("../ok.jpg", "sub/ok.jpg", "", "."):
        with pytest.raises(HTTPException) as exc:
            resolve_upload_path(name)
        assert exc.value.status_code in (400, 404)
