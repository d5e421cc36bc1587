import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, Response, UploadFile
from starlette import status

from homestead.dependencies import image_service_dependency
from homestead.limits import UPLOAD_LIMIT, limiter
from homestead.models.image_records import StorageType
from homestead.schemas.image import (
    StorageBackend,
    StoredImage,
    StoredImageCounts,
    StoredImageList,
)
from homestead.services.image_service import CACHE_CONTROL
from homestead.services.image_urls import to_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/images", tags=["images"])


@router.get("", response_model=StoredImageList)
async def list_images(image_service: image_service_dependency):
    images = await image_service.list_stored()
    database = sum(1 for image in images if image["source"] == StorageType.DATABASE)
    return StoredImageList(
        images=images,
        counts=StoredImageCounts(
            database=database,
            object_storage=len(images) - database,
            total=len(images),
        ),
    )


@router.post("", response_model=StoredImage, status_code=status.HTTP_201_CREATED)
@limiter.limit(UPLOAD_LIMIT)
async def upload_image(
    request: Request,
    image_service: image_service_dependency,
    file: UploadFile = File(...),
    storage: Optional[StorageBackend] = Form(None),
):
    stored = await image_service.store_upload(file, storage)
    return StoredImage(
        key=stored.key,
        url=to_url(stored.key),
        source=stored.source,
        mime_type=stored.content_type,
        size=stored.size,
    )


@router.get("/{key:path}")
async def get_image(key: str, image_service: image_service_dependency):
    image = await image_service.fetch(key)
    if not image:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Image not found"
        )
    return Response(
        content=image.data,
        media_type=image.content_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )


@router.delete("/{key:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(key: str, image_service: image_service_dependency):
    if not await image_service.delete(key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Image not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
