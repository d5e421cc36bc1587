from homestead.models.image_records import PropertyImage, StorageType, UnitImage
from homestead.models.image_storage import ImageStorage
from homestead.models.property import Property, PropertyType
from homestead.models.property_unit import PropertyUnit


def _property_payload(location_id, **overrides):
    payload = {
        "name": "Oak Row",
        "description": "Townhomes near the park",
        "address": "4 Oak Row",
        "bedrooms": 3,
        "bathrooms": 2.5,
        "sqft": 1600,
        "rent": 2400,
        "property_type": "townhome",
        "is_multifamily": False,
        "image_url": "https://example.com/oak.jpg",
        "features": ["garage", "patio"],
        "location_id": location_id,
    }
    payload.update(overrides)
    return payload


def test_create_get_update_property(client, make_location):
    location = make_location()
    r = client.post("/api/properties/", json=_property_payload(location.id))
    assert r.status_code == 201, r.text
    prop = r.json()
    assert prop["property_type"] == "townhome"
    assert prop["features"] == ["garage", "patio"]

    got = client.get(f"/api/properties/{prop['id']}")
    assert got.status_code == 200
    assert got.json()["name"] == "Oak Row"

    patched = client.patch(f"/api/properties/{prop['id']}", json={"rent": 2500})
    assert patched.status_code == 200
    assert patched.json()["rent"] == 2500
    assert patched.json()["name"] == "Oak Row"


def test_create_property_requires_location(client):
    r = client.post("/api/properties/", json=_property_payload(999))
    assert r.status_code == 404


def test_missing_property_is_404(client):
    r = client.get("/api/properties/999")
    assert r.status_code == 404
    assert r.json()["detail"] == "Property not found"


def test_list_properties_with_filters(client, make_location, make_property):
    north = make_location(slug="north-end")
    make_property(location=north, name="North A", available=False)
    make_property(name="South B")

    all_props = client.get("/api/properties/").json()
    assert {p["name"] for p in all_props} == {"North A", "South B"}

    north_only = client.get("/api/properties/", params={"location_id": north.id}).json()
    assert [p["name"] for p in north_only] == ["North A"]

    available = client.get("/api/properties/", params={"available": True}).json()
    assert [p["name"] for p in available] == ["South B"]


def test_units_only_on_multifamily(client, make_property):
    single = make_property(
        name="Single", property_type=PropertyType.SINGLE_FAMILY, is_multifamily=False
    )
    r = client.post(
        "/api/property-units/",
        json={
            "property_id": single.id,
            "unit_number": "1",
            "bedrooms": 1,
            "bathrooms": 1,
            "sqft": 500,
        },
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Cannot add units to non-multifamily property"


def test_unit_crud_keeps_unit_count(client, db_session, make_property):
    prop = make_property()
    unit_ids = []
    for number in ("1A", "1B"):
        r = client.post(
            "/api/property-units/",
            json={
                "property_id": prop.id,
                "unit_number": number,
                "bedrooms": 1,
                "bathrooms": 1,
                "sqft": 550,
                "rent": 1300,
            },
        )
        assert r.status_code == 201, r.text
        unit_ids.append(r.json()["id"])

    db_session.expire_all()
    assert db_session.get(Property, prop.id).unit_count == 2

    units = client.get(f"/api/properties/{prop.id}/units").json()
    assert [u["unit_number"] for u in units] == ["1A", "1B"]

    patched = client.patch(f"/api/property-units/{unit_ids[0]}", json={"available": False})
    assert patched.json()["available"] is False

    assert client.delete(f"/api/property-units/{unit_ids[0]}").status_code == 204
    assert client.get(f"/api/property-units/{unit_ids[0]}").status_code == 404
    db_session.expire_all()
    assert db_session.get(Property, prop.id).unit_count == 1


def test_delete_property_cascades_to_images_and_bytes(
    client, db_session, object_store, make_property, make_unit
):
    prop = make_property()
    unit = make_unit(prop=prop)
    db_session.add(
        ImageStorage(object_key="images/db.jpg", data=b"db", mime_type="image/jpeg", size=2)
    )
    object_store.objects["images/remote.jpg"] = b"remote"
    db_session.add_all(
        [
            PropertyImage(
                property_id=prop.id,
                url="/api/images/images%2Fdb.jpg",
                object_key="images/db.jpg",
                storage_type=StorageType.DATABASE,
            ),
            UnitImage(
                unit_id=unit.id,
                url="/api/images/images%2Fremote.jpg",
                object_key="images/remote.jpg",
                storage_type=StorageType.OBJECT_STORAGE,
            ),
        ]
    )
    db_session.commit()

    assert client.delete(f"/api/properties/{prop.id}").status_code == 204

    db_session.expire_all()
    assert db_session.query(PropertyUnit).count() == 0
    assert db_session.query(PropertyImage).count() == 0
    assert db_session.query(UnitImage).count() == 0
    assert db_session.query(ImageStorage).count() == 0
    assert object_store.objects == {}
