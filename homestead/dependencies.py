from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from homestead.database import SessionLocal
from homestead.services.image_service import ImageService
from homestead.services.object_storage import ObjectStorageClient


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]


def get_object_store(request: Request) -> ObjectStorageClient:
    """The object-store client built at startup and kept on ``app.state``."""
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        store = ObjectStorageClient()
        request.app.state.object_store = store
    return store


object_store_dependency = Annotated[ObjectStorageClient, Depends(get_object_store)]


def get_image_service(
    db: db_dependency, store: object_store_dependency
) -> ImageService:
    return ImageService(db, store)


image_service_dependency = Annotated[ImageService, Depends(get_image_service)]
