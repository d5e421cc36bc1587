"""Object key helpers.

Every image we store ourselves lives under a single folder prefix
(``images/<name>``). Older data was written with a mix of conventions, so
keys coming back from the database or from the browser are not always in
that shape. The functions here are pure and never raise.
"""

import hashlib
import os
import posixpath
import secrets
import time
from typing import Optional

from homestead.config import settings

URL_SCHEMES = ("http://", "https://")

# Extension to use when an upload carries no filename extension
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")


def folder_prefix(folder: Optional[str] = None) -> str:
    return f"{(folder or settings.IMAGE_FOLDER).strip('/')}/"


def is_absolute_url(value) -> bool:
    return isinstance(value, str) and value.lower().startswith(URL_SCHEMES)


def normalize(raw_key: str, folder: Optional[str] = None) -> str:
    """Canonicalize a storage-relative key.

    >>> normalize("images/images/a.jpg")
    'images/a.jpg'
    >>> normalize("a.jpg")
    'images/a.jpg'
    """
    prefix = folder_prefix(folder)
    key = (raw_key or "").lstrip("/")
    while key.startswith(prefix + prefix):
        key = key[len(prefix):]
    if not key.startswith(prefix):
        key = prefix + key
    return key


def basename(key: str) -> str:
    return posixpath.basename(key or "")


def has_folder_prefix(key: str, folder: Optional[str] = None) -> bool:
    return bool(key) and key.startswith(folder_prefix(folder))


def strip_folder(key: str, folder: Optional[str] = None) -> str:
    prefix = folder_prefix(folder)
    if key and key.startswith(prefix):
        return key[len(prefix):]
    return key


def is_object_storage_key(value, folder: Optional[str] = None) -> bool:
    if not value or not isinstance(value, str) or is_absolute_url(value):
        return False
    return value.startswith(folder_prefix(folder))


def is_image_key(key: str) -> bool:
    return os.path.splitext(key or "")[1].lower() in IMAGE_EXTENSIONS


def extension_for(filename: Optional[str], content_type: Optional[str] = None) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext:
        return ext
    return CONTENT_TYPE_EXTENSIONS.get((content_type or "").lower(), ".jpg")


def generate_object_key(
    filename: Optional[str],
    content_type: Optional[str] = None,
    folder: Optional[str] = None,
) -> str:
    """Build a unique key such as ``images/3f2a...c1.jpg`` for an upload."""
    timestamp = int(time.time() * 1000)
    seed = f"{filename or 'upload'}-{timestamp}-{secrets.token_hex(4)}"
    digest = hashlib.md5(seed.encode("utf-8")).hexdigest()
    return f"{folder_prefix(folder)}{digest}{extension_for(filename, content_type)}"
