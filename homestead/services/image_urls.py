from typing import Optional
from urllib.parse import quote

from homestead.config import settings
from homestead.services.image_keys import is_absolute_url

PROXY_PREFIX = "/api/images/"
LEGACY_PREFIX = "/uploads/"


def to_url(key, use_proxy: bool = True) -> str:
    """Turn a stored image reference into something a browser can fetch.

    Absolute URLs and paths we already serve are returned unchanged. Storage
    keys become ``/api/images/<encoded key>``. ``use_proxy=False`` builds a
    direct storage URL instead; that skips the proxy's key resolution and
    should not be handed to production clients.
    """
    if not key or not isinstance(key, str):
        return ""

    if is_absolute_url(key):
        return key

    if key.startswith(PROXY_PREFIX) or key.startswith(LEGACY_PREFIX):
        return key

    if use_proxy:
        return f"{PROXY_PREFIX}{quote(key, safe='')}"

    base = settings.OBJECT_STORAGE_PUBLIC_URL.rstrip("/")
    return f"{base}/{settings.OBJECT_STORAGE_BUCKET_ID}/{key}"


def display_url(url: Optional[str], object_key: Optional[str] = None) -> str:
    return to_url(url) or to_url(object_key) or settings.PLACEHOLDER_IMAGE_URL
