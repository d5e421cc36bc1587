import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# Set test database URL BEFORE importing any homestead modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"

from homestead.main import app
from homestead.database import Base
from homestead.dependencies import get_object_store
from homestead.models.location import Location
from homestead.models.property import Property, PropertyType
from homestead.models.property_unit import PropertyUnit
import homestead.database as db_module
import homestead.dependencies as dependencies_module
import homestead.Middleware.audit_middleware as audit_mw


class FakeObjectStore:
    """In-memory stand-in for ObjectStorageClient."""

    bucket_id = "homestead-images"
    configured = True

    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.downloads = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def upload(self, key, data, content_type=None):
        if self.fail_uploads:
            return False
        self.objects[key] = data
        return True

    async def download_bytes(self, key):
        self.downloads.append(key)
        return self.objects.get(key)

    async def download_stream(self, key):
        data = self.objects.get(key)
        return iter([data]) if data is not None else None

    async def delete(self, key):
        if self.fail_deletes:
            return False
        return self.objects.pop(key, None) is not None

    async def list(self, prefix=None):
        return [key for key in self.objects if not prefix or key.startswith(prefix)]

    async def exists(self, key):
        return key in self.objects

    async def check_config(self):
        return True


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections
    )
    return engine


@pytest.fixture()
def db_session(test_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    # Fresh schema per test
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def patch_sessionlocal(monkeypatch, test_engine, db_session):
    monkeypatch.setattr(db_module, "engine", test_engine, raising=False)

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    monkeypatch.setattr(db_module, "SessionLocal", TestingSessionLocal, raising=True)
    # get_db looks SessionLocal up at call time
    monkeypatch.setattr(
        dependencies_module, "SessionLocal", TestingSessionLocal, raising=True
    )
    monkeypatch.setattr(audit_mw, "SessionLocal", TestingSessionLocal, raising=True)

    # Disable rate limiter globally for tests
    if hasattr(app.state, "limiter"):
        setattr(app.state.limiter, "enabled", False)
    yield


@pytest.fixture(autouse=True)
def object_store():
    store = FakeObjectStore()
    app.dependency_overrides[get_object_store] = lambda: store
    yield store
    app.dependency_overrides.pop(get_object_store, None)


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def make_location(db_session):
    def _make(slug="riverside", **overrides):
        data = {
            "slug": slug,
            "name": slug.replace("-", " ").title(),
            "description": "Quiet streets near the river",
            "image_url": "https://example.com/riverside.jpg",
            "link_text": "Explore",
        }
        data.update(overrides)
        location = Location(**data)
        db_session.add(location)
        db_session.commit()
        db_session.refresh(location)
        return location

    return _make


@pytest.fixture()
def make_property(db_session, make_location):
    shared = {}

    def _make(location=None, **overrides):
        if location is None:
            if "location" not in shared:
                shared["location"] = make_location()
            location = shared["location"]
        data = {
            "name": "Maple Court",
            "description": "Four units around a courtyard",
            "address": "12 Maple St",
            "bedrooms": 2,
            "bathrooms": 1.5,
            "sqft": 950,
            "rent": 1800,
            "property_type": PropertyType.MULTI_FAMILY,
            "is_multifamily": True,
            "image_url": "https://example.com/maple.jpg",
            "location_id": location.id,
        }
        data.update(overrides)
        prop = Property(**data)
        db_session.add(prop)
        db_session.commit()
        db_session.refresh(prop)
        return prop

    return _make


@pytest.fixture()
def make_unit(db_session, make_property):
    def _make(prop=None, **overrides):
        prop = prop or make_property()
        data = {
            "property_id": prop.id,
            "unit_number": "1A",
            "bedrooms": 1,
            "bathrooms": 1.0,
            "sqft": 600,
            "rent": 1200,
        }
        data.update(overrides)
        unit = PropertyUnit(**data)
        db_session.add(unit)
        db_session.commit()
        db_session.refresh(unit)
        return unit

    return _make
