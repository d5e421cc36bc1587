import asyncio
from types import SimpleNamespace

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
import requests

from homestead.config import Settings
from homestead.services import object_storage as object_storage_module
from homestead.services.object_storage import ObjectStorageClient


def _client(**overrides):
    config = Settings(
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key",
        CLOUDINARY_API_SECRET="secret",
        **overrides,
    )
    return ObjectStorageClient(config)


class _FakeResponse:
    def __init__(self, status_code, content=b""):
        self.status_code = status_code
        self.content = content
        self.closed = False

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]

    def close(self):
        self.closed = True


def test_upload_passes_key_verbatim_as_raw_resource(monkeypatch):
    calls = []

    def _upload(file, **options):
        calls.append((file.read(), options))
        return {"public_id": options["public_id"]}

    monkeypatch.setattr(cloudinary.uploader, "upload", _upload)
    ok = asyncio.run(_client().upload("images/a.jpg", b"data", "image/jpeg"))

    assert ok is True
    data, options = calls[0]
    assert data == b"data"
    assert options["public_id"] == "images/a.jpg"
    assert options["resource_type"] == "raw"
    assert options["cloud_name"] == "demo"
    assert options["context"] == {"content_type": "image/jpeg"}


def test_upload_failure_returns_false(monkeypatch):
    def _upload(file, **options):
        raise cloudinary.exceptions.Error("boom")

    monkeypatch.setattr(cloudinary.uploader, "upload", _upload)
    assert asyncio.run(_client().upload("images/a.jpg", b"data")) is False


def test_download_bytes_maps_status_codes(monkeypatch):
    responses = {
        "images/hit.jpg": _FakeResponse(200, b"img"),
        "images/miss.jpg": _FakeResponse(404),
        "images/error.jpg": _FakeResponse(500),
    }
    requested = []

    def _get(url, **kwargs):
        requested.append(url)
        for key, response in responses.items():
            if url.endswith(key):
                return response
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(object_storage_module.requests, "get", _get)
    client = _client()

    assert asyncio.run(client.download_bytes("images/hit.jpg")) == b"img"
    assert asyncio.run(client.download_bytes("images/miss.jpg")) is None
    assert asyncio.run(client.download_bytes("images/error.jpg")) is None
    assert asyncio.run(client.download_bytes("images/down.jpg")) is None
    assert all("/raw/upload/" in url for url in requested)


def test_download_stream_yields_chunks_and_closes(monkeypatch):
    response = _FakeResponse(200, b"x" * 100)
    monkeypatch.setattr(
        object_storage_module.requests, "get", lambda url, **kwargs: response
    )
    monkeypatch.setattr(object_storage_module, "STREAM_CHUNK_SIZE", 40)

    chunks = asyncio.run(_client().download_stream("images/a.jpg"))
    assert [len(chunk) for chunk in chunks] == [40, 40, 20]
    assert response.closed


def test_download_stream_miss_returns_none(monkeypatch):
    response = _FakeResponse(404)
    monkeypatch.setattr(
        object_storage_module.requests, "get", lambda url, **kwargs: response
    )
    assert asyncio.run(_client().download_stream("images/a.jpg")) is None
    assert response.closed


def test_delete_checks_result(monkeypatch):
    results = {"images/a.jpg": {"result": "ok"}, "images/b.jpg": {"result": "not found"}}
    monkeypatch.setattr(
        cloudinary.uploader, "destroy", lambda key, **options: results[key]
    )
    client = _client()
    assert asyncio.run(client.delete("images/a.jpg")) is True
    assert asyncio.run(client.delete("images/b.jpg")) is False
    assert asyncio.run(client.delete("images/missing.jpg")) is False


def test_list_follows_cursor_and_normalizes_entries(monkeypatch):
    pages = {
        None: {
            "resources": [
                {"public_id": "images/a.jpg"},
                {"name": "images/b.png"},
            ],
            "next_cursor": "page-2",
        },
        "page-2": {
            "resources": [
                SimpleNamespace(name="images/c.gif"),
                "images/d.webp",
                None,
                {},
            ],
        },
    }
    seen_options = []

    def _resources(**options):
        seen_options.append(options)
        return pages[options.get("next_cursor")]

    monkeypatch.setattr(cloudinary.api, "resources", _resources)
    keys = asyncio.run(_client().list(prefix="images/"))

    assert keys == ["images/a.jpg", "images/b.png", "images/c.gif", "images/d.webp"]
    assert len(seen_options) == 2
    assert seen_options[0]["prefix"] == "images/"


def test_list_failure_returns_empty_list(monkeypatch):
    def _resources(**options):
        raise cloudinary.exceptions.Error("boom")

    monkeypatch.setattr(cloudinary.api, "resources", _resources)
    assert asyncio.run(_client().list()) == []


def test_exists(monkeypatch):
    def _resource(key, **options):
        if key == "images/a.jpg":
            return {"public_id": key}
        raise cloudinary.exceptions.NotFound("missing")

    monkeypatch.setattr(cloudinary.api, "resource", _resource)
    client = _client()
    assert asyncio.run(client.exists("images/a.jpg")) is True
    assert asyncio.run(client.exists("images/b.jpg")) is False


def test_check_config_requires_credentials(monkeypatch):
    monkeypatch.setattr(cloudinary.api, "resources", lambda **options: {"resources": []})
    assert asyncio.run(_client().check_config()) is True

    unconfigured = ObjectStorageClient(
        Settings(CLOUDINARY_CLOUD_NAME="", CLOUDINARY_API_KEY="", CLOUDINARY_API_SECRET="")
    )
    assert unconfigured.configured is False
    assert asyncio.run(unconfigured.check_config()) is False
