"""Files from the old ``uploads/`` directory.

Before images moved to object storage they were written to disk and
referenced as ``/uploads/<filename>``. These helpers keep serving those
files and move them into object storage on request.
"""

import logging
import os
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from homestead.config import settings
from homestead.models.image_records import PropertyImage, StorageType, UnitImage
from homestead.services.image_keys import generate_object_key, is_image_key
from homestead.services.image_service import guess_content_type
from homestead.services.image_urls import LEGACY_PREFIX, to_url

logger = logging.getLogger(__name__)


def uploads_dir() -> str:
    return os.path.abspath(settings.UPLOADS_DIR)


def resolve_upload_path(filename: str) -> str:
    """Absolute path of an upload, refusing anything outside the uploads directory."""
    root = uploads_dir()
    path = os.path.abspath(os.path.join(root, filename))
    if not filename or os.path.dirname(path) != root:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename"
        )
    if not os.path.isfile(path):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Image not found"
        )
    return path


def scan_uploads() -> List[str]:
    root = uploads_dir()
    if not os.path.isdir(root):
        logger.info(f"Uploads directory {root} does not exist")
        return []
    files = sorted(
        name
        for name in os.listdir(root)
        if is_image_key(name) and os.path.isfile(os.path.join(root, name))
    )
    logger.info(f"Found {len(files)} image files in {root}")
    return files


def _rewrite_records(
    db: Session, filename: str, key: str, content_type: str, size: int
) -> int:
    legacy_url = f"{LEGACY_PREFIX}{filename}"
    updated = 0
    for model in (PropertyImage, UnitImage):
        rows = db.execute(select(model).where(model.url == legacy_url)).scalars()
        for image in rows:
            image.url = to_url(key)
            image.object_key = key
            image.storage_type = StorageType.OBJECT_STORAGE
            image.mime_type = content_type
            image.size = size
            updated += 1
    db.commit()
    return updated


async def migrate_uploads(
    db: Session, store, filenames: Optional[List[str]] = None
) -> List[dict]:
    """Copy legacy upload files into object storage and repoint their image rows.

    Files are left on disk. A file whose upload fails is reported and its
    rows are not touched.
    """
    report = []
    for filename in filenames if filenames is not None else scan_uploads():
        path = os.path.join(uploads_dir(), filename)
        content_type = guess_content_type(filename)
        with open(path, "rb") as fh:
            data = fh.read()

        key = generate_object_key(filename, content_type)
        if not await store.upload(key, data, content_type):
            logger.error(f"Failed to migrate {filename} to object storage")
            report.append({"filename": filename, "status": "failed"})
            continue

        updated = _rewrite_records(db, filename, key, content_type, len(data))
        logger.info(f"Migrated {filename} to {key}, updated {updated} records")
        report.append(
            {
                "filename": filename,
                "object_key": key,
                "updated_records": updated,
                "status": "migrated",
            }
        )
    return report
