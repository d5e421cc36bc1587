import logging
from typing import List, Optional, Type

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from homestead.models.image_records import (
    ImageRecordMixin,
    PropertyImage,
    StorageType,
    UnitImage,
)
from homestead.models.property import Property
from homestead.models.property_unit import PropertyUnit
from homestead.schemas.image import (
    ImageRecordBase,
    InlineImageSource,
    UrlImageSource,
)
from homestead.services.image_service import ImageService
from homestead.services.image_urls import to_url

logger = logging.getLogger(__name__)


class ImageRecordService:
    """CRUD for images that belong to an owner (a property or a unit).

    The same code serves ``property_images`` and ``unit_images``; only the
    model and the owner model differ. Featured flag changes and reorders are
    committed as a single transaction so an owner never ends up with two
    featured images or a half-applied swap.
    """

    def __init__(self, db: Session, model: Type[ImageRecordMixin], owner_model):
        self.db = db
        self.model = model
        self.owner_model = owner_model
        self.owner_column = getattr(model, model.owner_field)
        self.label = "Property unit" if owner_model is PropertyUnit else "Property"

    @classmethod
    def for_properties(cls, db: Session) -> "ImageRecordService":
        return cls(db, PropertyImage, Property)

    @classmethod
    def for_units(cls, db: Session) -> "ImageRecordService":
        return cls(db, UnitImage, PropertyUnit)

    # ---------- reads ----------

    def get_image(self, image_id: int):
        image = self.db.execute(
            select(self.model).where(self.model.id == image_id)
        ).scalar_one_or_none()
        if not image:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Image with id {image_id} not found",
            )
        return image

    def get_by_object_key(self, object_key: str):
        image = self.db.execute(
            select(self.model).where(self.model.object_key == object_key).limit(1)
        ).scalar_one_or_none()
        if not image:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.label} image not found",
            )
        return image

    def ensure_owner(self, owner_id: int):
        owner = self.db.get(self.owner_model, owner_id)
        if not owner:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{self.label} not found",
            )
        return owner

    def list_for_owner(self, owner_id: int) -> List[ImageRecordMixin]:
        return (
            self.db.execute(
                select(self.model)
                .where(self.owner_column == owner_id)
                .order_by(self.model.display_order.asc(), self.model.id.asc())
            )
            .scalars()
            .all()
        )

    def list_page(self, page: int = 1, limit: int = 20):
        total = self.db.execute(
            select(func.count()).select_from(self.model)
        ).scalar_one()
        rows = (
            self.db.execute(
                select(self.model)
                .order_by(self.model.id.asc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return rows, total

    def _next_display_order(self, owner_id: int) -> int:
        current = self.db.execute(
            select(func.max(self.model.display_order)).where(
                self.owner_column == owner_id
            )
        ).scalar_one_or_none()
        return 0 if current is None else current + 1

    def _unset_featured_siblings(self, owner_id: int, keep_id: Optional[int] = None):
        stmt = (
            update(self.model)
            .where(self.owner_column == owner_id, self.model.is_featured == True)
            .values(is_featured=False)
        )
        if keep_id is not None:
            stmt = stmt.where(self.model.id != keep_id)
        self.db.execute(stmt)

    # ---------- writes ----------

    async def create_image(
        self, owner_id: int, payload: ImageRecordBase, image_service: ImageService
    ):
        self.ensure_owner(owner_id)
        source = payload.source

        if isinstance(source, UrlImageSource):
            fields = {"url": source.url, "storage_type": StorageType.EXTERNAL}
        elif isinstance(source, InlineImageSource):
            stored = await image_service.store_bytes(
                source.data, source.filename, source.content_type, payload.storage
            )
            fields = self._stored_fields(stored)
        else:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Either image data or an external URL is required",
            )

        return self._insert(
            owner_id,
            alt=payload.alt,
            display_order=payload.display_order,
            is_featured=payload.is_featured,
            **fields,
        )

    async def create_from_upload(
        self,
        owner_id: int,
        file,
        image_service: ImageService,
        alt: str = "",
        display_order: Optional[int] = None,
        is_featured: bool = False,
        storage: Optional[str] = None,
    ):
        self.ensure_owner(owner_id)
        stored = await image_service.store_upload(file, storage)
        return self._insert(
            owner_id,
            alt=alt or "",
            display_order=display_order,
            is_featured=is_featured,
            **self._stored_fields(stored),
        )

    @staticmethod
    def _stored_fields(stored) -> dict:
        return {
            "url": to_url(stored.key),
            "object_key": stored.key,
            "storage_type": stored.source,
            "mime_type": stored.content_type,
            "size": stored.size,
        }

    def _insert(self, owner_id: int, display_order: Optional[int], is_featured: bool, **fields):
        if display_order is None:
            display_order = self._next_display_order(owner_id)
        if is_featured:
            self._unset_featured_siblings(owner_id)

        image = self.model(
            display_order=display_order,
            is_featured=is_featured,
            **{self.model.owner_field: owner_id},
            **fields,
        )
        self.db.add(image)
        self.db.commit()
        self.db.refresh(image)
        return image

    def set_featured(self, image_id: int, is_featured: bool):
        image = self.get_image(image_id)
        if is_featured:
            self._unset_featured_siblings(image.owner_id, keep_id=image.id)
        image.is_featured = is_featured
        self.db.commit()
        self.db.refresh(image)
        return image

    def set_order(self, image_id: int, display_order: int):
        image = self.get_image(image_id)
        image.display_order = display_order
        self.db.commit()
        self.db.refresh(image)
        return image

    def move(self, image_id: int, direction: str):
        """Swap an image's position with its neighbor above or below.

        Only the two rows change. Moving the first image up or the last image
        down leaves everything as it is. If the two rows share an order value
        the owner's images are renumbered 0..n-1 first so the swap is visible.
        """
        if direction not in ("up", "down"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Direction must be 'up' or 'down'",
            )

        image = self.get_image(image_id)
        siblings = self.list_for_owner(image.owner_id)
        position = next(i for i, row in enumerate(siblings) if row.id == image.id)
        target = position - 1 if direction == "up" else position + 1
        if target < 0 or target >= len(siblings):
            return image

        neighbor = siblings[target]
        if neighbor.display_order == image.display_order:
            for index, row in enumerate(siblings):
                row.display_order = index

        image.display_order, neighbor.display_order = (
            neighbor.display_order,
            image.display_order,
        )
        self.db.commit()
        self.db.refresh(image)
        return image

    async def delete_image(self, image_id: int, image_service: ImageService):
        image = self.get_image(image_id)
        key, storage_type = image.object_key, image.storage_type

        self.db.delete(image)
        self.db.commit()
        await image_service.delete_stored(key, storage_type)
        return image_id
