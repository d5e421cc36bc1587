"""Object storage adapter.

Wraps the Cloudinary SDK behind a small key/bytes interface. Images are
stored as ``raw`` resources so the public id is the object key verbatim,
extension included. Every failure is logged and turned into a sentinel
(``False``, ``None`` or ``[]``); callers never need to catch at this layer.
"""

import asyncio
import io
import logging
from functools import partial
from typing import Iterator, List, Optional

import cloudinary
import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils
import requests

from homestead.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "raw"
LIST_PAGE_SIZE = 500
STREAM_CHUNK_SIZE = 64 * 1024


def _entry_key(entry) -> Optional[str]:
    """Pull the key out of one listing entry, whatever shape it came in."""
    if entry is None:
        return None
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("public_id") or entry.get("name")
    name = getattr(entry, "public_id", None) or getattr(entry, "name", None)
    return str(name) if name else str(entry)


class ObjectStorageClient:
    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.bucket_id = config.OBJECT_STORAGE_BUCKET_ID
        self.timeout = config.OBJECT_STORAGE_TIMEOUT
        self._credentials = {
            "cloud_name": config.CLOUDINARY_CLOUD_NAME,
            "api_key": config.CLOUDINARY_API_KEY,
            "api_secret": config.CLOUDINARY_API_SECRET,
        }

    @property
    def configured(self) -> bool:
        return all(self._credentials.values())

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    def _delivery_url(self, key: str) -> str:
        url, _ = cloudinary.utils.cloudinary_url(
            key,
            resource_type=RESOURCE_TYPE,
            type="upload",
            secure=True,
            cloud_name=self._credentials["cloud_name"],
        )
        return url

    async def upload(
        self, key: str, data: bytes, content_type: Optional[str] = None
    ) -> bool:
        options = {
            "public_id": key,
            "resource_type": RESOURCE_TYPE,
            "overwrite": True,
            "unique_filename": False,
            "use_filename": False,
        }
        if content_type:
            options["context"] = {"content_type": content_type}
        try:
            await self._run(
                cloudinary.uploader.upload,
                io.BytesIO(data),
                **options,
                **self._credentials,
            )
            logger.info(f"Uploaded {len(data)} bytes to object storage as {key}")
            return True
        except Exception as e:
            logger.error(f"Error uploading {key} to object storage: {e}")
            return False

    async def download_bytes(self, key: str) -> Optional[bytes]:
        try:
            response = await self._run(
                requests.get, self._delivery_url(key), timeout=self.timeout
            )
        except Exception as e:
            logger.error(f"Error downloading {key} from object storage: {e}")
            return None

        if response.status_code == 404:
            logger.debug(f"Object storage miss for {key}")
            return None
        if response.status_code != 200:
            logger.error(
                f"Object storage returned {response.status_code} for {key}"
            )
            return None
        return response.content

    async def download_stream(self, key: str) -> Optional[Iterator[bytes]]:
        try:
            response = await self._run(
                requests.get, self._delivery_url(key), stream=True, timeout=self.timeout
            )
        except Exception as e:
            logger.error(f"Error opening stream for {key} from object storage: {e}")
            return None

        if response.status_code != 200:
            if response.status_code != 404:
                logger.error(
                    f"Object storage returned {response.status_code} for {key}"
                )
            response.close()
            return None

        def _chunks():
            try:
                for chunk in response.iter_content(chunk_size=STREAM_CHUNK_SIZE):
                    if chunk:
                        yield chunk
            except requests.RequestException as e:
                logger.error(f"Stream for {key} aborted: {e}")
            finally:
                response.close()

        return _chunks()

    async def delete(self, key: str) -> bool:
        try:
            result = await self._run(
                cloudinary.uploader.destroy,
                key,
                resource_type=RESOURCE_TYPE,
                invalidate=True,
                **self._credentials,
            )
        except Exception as e:
            logger.error(f"Error deleting {key} from object storage: {e}")
            return False

        if (result or {}).get("result") != "ok":
            logger.error(f"Object storage refused to delete {key}: {result}")
            return False
        return True

    async def list(self, prefix: Optional[str] = None) -> List[str]:
        keys: List[str] = []
        cursor = None
        try:
            while True:
                options = {
                    "resource_type": RESOURCE_TYPE,
                    "type": "upload",
                    "max_results": LIST_PAGE_SIZE,
                }
                if prefix:
                    options["prefix"] = prefix
                if cursor:
                    options["next_cursor"] = cursor
                page = await self._run(
                    cloudinary.api.resources, **options, **self._credentials
                )
                entries = page.get("resources", []) if isinstance(page, dict) else page
                keys.extend(k for k in map(_entry_key, entries or []) if k)
                cursor = page.get("next_cursor") if isinstance(page, dict) else None
                if not cursor:
                    break
        except Exception as e:
            logger.error(f"Error listing object storage (prefix={prefix!r}): {e}")
            return []
        return keys

    async def exists(self, key: str) -> bool:
        try:
            await self._run(
                cloudinary.api.resource,
                key,
                resource_type=RESOURCE_TYPE,
                **self._credentials,
            )
            return True
        except cloudinary.exceptions.NotFound:
            return False
        except Exception as e:
            logger.error(f"Error checking {key} in object storage: {e}")
            return False

    async def check_config(self) -> bool:
        """Verify credentials are present and the store answers a listing."""
        if not self.configured:
            logger.warning("Object storage credentials are not configured")
            return False
        try:
            await self._run(
                cloudinary.api.resources,
                resource_type=RESOURCE_TYPE,
                max_results=1,
                **self._credentials,
            )
            return True
        except Exception as e:
            logger.error(f"Failed to connect to object storage: {e}")
            return False
