import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from homestead.config import settings
from homestead.models.image_records import PropertyImage, StorageType, UnitImage
from homestead.services.blob_repository import BlobRepository
from homestead.services.image_keys import generate_object_key, is_image_key
from homestead.services.image_resolver import ImageResolver
from homestead.services.image_urls import to_url

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
}
DEFAULT_CONTENT_TYPE = "image/jpeg"
CACHE_CONTROL = "public, max-age=86400"
EXTENSION_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}


@dataclass
class StoredObject:
    key: str
    source: str
    content_type: str
    size: int


@dataclass
class FetchedImage:
    key: str
    data: bytes
    content_type: str
    source: str


def guess_content_type(key: str) -> str:
    ext = os.path.splitext(key or "")[1].lower()
    return EXTENSION_CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def validate_image(data: bytes, content_type: Optional[str]) -> str:
    content_type = (content_type or "").split(";")[0].strip().lower()
    if content_type == "image/jpg":
        content_type = "image/jpeg"
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only image files are allowed (jpeg, png, gif, webp, svg)",
        )
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Image file is empty"
        )
    if len(data) > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {limit_mb}MB.",
        )
    return content_type


class ImageService:
    """Stores, fetches and deletes image bytes across both backends."""

    def __init__(self, db: Session, store):
        self.db = db
        self.store = store
        self.blobs = BlobRepository(db)
        self.resolver = ImageResolver(store)

    @property
    def store_enabled(self) -> bool:
        return getattr(self.store, "configured", True)

    async def store_bytes(
        self,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        backend: Optional[str] = None,
    ) -> StoredObject:
        content_type = validate_image(data, content_type)
        backend = backend or settings.IMAGE_BACKEND
        key = generate_object_key(filename, content_type)

        if backend == StorageType.OBJECT_STORAGE:
            if not await self.store.upload(key, data, content_type):
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail="Failed to upload image to object storage",
                )
        else:
            self.blobs.save(key, data, content_type)

        logger.info(f"Stored {filename or 'upload'} as {key} ({backend})")
        return StoredObject(
            key=key, source=backend, content_type=content_type, size=len(data)
        )

    async def store_upload(
        self, file: UploadFile, backend: Optional[str] = None
    ) -> StoredObject:
        data = await file.read()
        return await self.store_bytes(data, file.filename, file.content_type, backend)

    def _recorded_storage_type(self, key: str) -> Optional[str]:
        """Backend named by any image row that references ``key``."""
        for model in (PropertyImage, UnitImage):
            storage_type = self.db.execute(
                select(model.storage_type)
                .where(or_(model.object_key == key, model.url == key))
                .limit(1)
            ).scalar_one_or_none()
            if storage_type:
                return storage_type
        return None

    async def _fetch_from_database(self, key: str) -> Optional[FetchedImage]:
        blob = self.blobs.get_by_object_key(key)
        if not blob:
            return None
        return FetchedImage(
            key=blob.object_key,
            data=blob.data,
            content_type=blob.mime_type,
            source=StorageType.DATABASE,
        )

    async def _fetch_from_object_storage(self, key: str) -> Optional[FetchedImage]:
        if not self.store_enabled:
            return None
        resolved = await self.resolver.resolve(key)
        if not resolved:
            return None
        return FetchedImage(
            key=resolved.key,
            data=resolved.data,
            content_type=guess_content_type(resolved.key),
            source=StorageType.OBJECT_STORAGE,
        )

    async def fetch(self, key: str) -> Optional[FetchedImage]:
        """Find the bytes for ``key`` in whichever backend has them.

        The database is checked first unless an image row says the key lives
        in object storage. Returns ``None`` when neither backend has it.
        """
        if not key:
            return None

        lookups = [self._fetch_from_database, self._fetch_from_object_storage]
        if self._recorded_storage_type(key) == StorageType.OBJECT_STORAGE:
            lookups.reverse()

        for lookup in lookups:
            image = await lookup(key)
            if image:
                return image
        return None

    async def delete(self, key: str) -> bool:
        """Remove ``key`` from the backend that holds it; False when absent."""
        if self.blobs.delete_by_object_key(key):
            logger.info(f"Deleted {key} from database storage")
            return True

        if not self.store_enabled:
            return False
        if not await self.store.exists(key):
            return False
        if not await self.store.delete(key):
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete image from storage",
            )
        logger.info(f"Deleted {key} from object storage")
        return True

    async def delete_stored(self, key: Optional[str], storage_type: str) -> None:
        """Best-effort removal of bytes behind an image record being deleted."""
        if not key:
            return
        if storage_type == StorageType.DATABASE:
            if not self.blobs.delete_by_object_key(key):
                logger.warning(f"Database blob {key} was already gone")
        elif storage_type == StorageType.OBJECT_STORAGE:
            if not await self.store.delete(key):
                logger.error(f"Failed to delete {key} from object storage")

    async def list_stored(self) -> List[dict]:
        images = [
            {
                "key": blob.object_key,
                "url": to_url(blob.object_key),
                "source": StorageType.DATABASE,
                "mime_type": blob.mime_type,
                "size": blob.size,
                "created_at": blob.created_at,
            }
            for blob in self.blobs.list_all()
        ]
        stored_keys = await self.store.list() if self.store_enabled else []
        for key in stored_keys:
            if is_image_key(key):
                images.append(
                    {
                        "key": key,
                        "url": to_url(key),
                        "source": StorageType.OBJECT_STORAGE,
                        "mime_type": guess_content_type(key),
                    }
                )
        return images
