import re

from homestead.services.image_keys import (
    basename,
    extension_for,
    generate_object_key,
    is_absolute_url,
    is_image_key,
    is_object_storage_key,
    normalize,
    strip_folder,
)


def test_normalize_collapses_doubled_prefix():
    assert normalize("images/images/a.jpg") == "images/a.jpg"
    assert normalize("images/images/images/a.jpg") == "images/a.jpg"


def test_normalize_adds_prefix_and_strips_leading_slashes():
    assert normalize("a.jpg") == "images/a.jpg"
    assert normalize("/images/a.jpg") == "images/a.jpg"
    assert normalize("//a.jpg") == "images/a.jpg"


def test_normalize_is_idempotent():
    for raw in ["a.jpg", "/images/images/b.png", "images/c.gif", "nested/d.jpg", ""]:
        once = normalize(raw)
        assert normalize(once) == once


def test_normalize_with_custom_folder():
    assert normalize("photos/photos/a.jpg", folder="photos") == "photos/a.jpg"
    assert normalize("a.jpg", folder="/photos/") == "photos/a.jpg"


def test_key_helpers():
    assert basename("images/sub/a.jpg") == "a.jpg"
    assert basename("") == ""
    assert strip_folder("images/a.jpg") == "a.jpg"
    assert strip_folder("other/a.jpg") == "other/a.jpg"
    assert is_object_storage_key("images/a.jpg")
    assert not is_object_storage_key("https://cdn.example.com/images/a.jpg")
    assert not is_object_storage_key("/uploads/a.jpg")
    assert not is_object_storage_key(None)
    assert is_absolute_url("HTTPS://example.com/a.jpg")
    assert not is_absolute_url("images/a.jpg")
    assert is_image_key("images/A.JPEG")
    assert not is_image_key("images/readme.txt")


def test_extension_for_falls_back_to_content_type():
    assert extension_for("house.PNG", "image/jpeg") == ".png"
    assert extension_for("house", "image/webp") == ".webp"
    assert extension_for(None, None) == ".jpg"


def test_generate_object_key_shape_and_uniqueness():
    first = generate_object_key("house.jpg", "image/jpeg")
    second = generate_object_key("house.jpg", "image/jpeg")
    assert re.fullmatch(r"images/[0-9a-f]{32}\.jpg", first)
    assert first != second
    assert generate_object_key("scan", "image/png").endswith(".png")
