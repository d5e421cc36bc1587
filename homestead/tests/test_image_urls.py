from homestead.config import settings
from homestead.services.image_urls import display_url, to_url


def test_absolute_urls_pass_through():
    assert to_url("https://example.com/a.jpg") == "https://example.com/a.jpg"
    assert to_url("http://example.com/a.jpg") == "http://example.com/a.jpg"


def test_keys_become_proxy_paths():
    assert to_url("images/a.jpg") == "/api/images/images%2Fa.jpg"
    assert to_url("images/a b.jpg") == "/api/images/images%2Fa%20b.jpg"


def test_served_paths_pass_through():
    assert to_url("/api/images/images%2Fa.jpg") == "/api/images/images%2Fa.jpg"
    assert to_url("/uploads/old.jpg") == "/uploads/old.jpg"


def test_malformed_keys_return_empty_string():
    assert to_url("") == ""
    assert to_url(None) == ""
    assert to_url(42) == ""


def test_direct_url_mode():
    url = to_url("images/a.jpg", use_proxy=False)
    assert url == (
        f"{settings.OBJECT_STORAGE_PUBLIC_URL.rstrip('/')}/"
        f"{settings.OBJECT_STORAGE_BUCKET_ID}/images/a.jpg"
    )


def test_display_url_prefers_url_then_key_then_placeholder():
    assert display_url("https://example.com/a.jpg", "images/b.jpg") == "https://example.com/a.jpg"
    assert display_url(None, "images/b.jpg") == "/api/images/images%2Fb.jpg"
    assert display_url(None, None) == settings.PLACEHOLDER_IMAGE_URL
