import logging
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import List, Optional
from homestead.models.location import Location
from homestead.models.property import Property, PropertyType
from homestead.models.property_unit import PropertyUnit
from homestead.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    UnitCreate,
    UnitUpdate,
)
from homestead.services.image_service import ImageService

logger = logging.getLogger(__name__)


def _apply_changes(instance, update_data: dict) -> dict:
    """Set each field and return ``{field: {"old": ..., "new": ...}}`` for the audit log."""
    changes = {}
    for key, value in update_data.items():
        old = getattr(instance, key)
        if old != value:
            changes[key] = {
                "old": old.value if isinstance(old, PropertyType) else old,
                "new": value.value if isinstance(value, PropertyType) else value,
            }
        setattr(instance, key, value)
    return changes


async def _delete_image_bytes(image_service: Optional[ImageService], images) -> None:
    if image_service is None:
        return
    for key, storage_type in images:
        await image_service.delete_stored(key, storage_type)


class PropertyService:
    def _ensure_location(self, db: Session, location_id: int):
        if not db.get(Location, location_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Location with ID {location_id} not found",
            )

    async def create_property(self, db: Session, property_data: PropertyCreate):
        self._ensure_location(db, property_data.location_id)

        new_property = Property(**property_data.model_dump())

        db.add(new_property)
        db.commit()
        db.refresh(new_property)
        return new_property

    async def get_properties(
        self,
        db: Session,
        location_id: Optional[int] = None,
        property_type: Optional[PropertyType] = None,
        available: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Property]:
        query = select(Property)
        if location_id is not None:
            query = query.where(Property.location_id == location_id)
        if property_type is not None:
            query = query.where(Property.property_type == property_type)
        if available is not None:
            query = query.where(Property.available == available)

        result = db.execute(query.order_by(Property.id).offset(skip).limit(limit))
        return result.scalars().all()

    async def get_property(self, db: Session, property_id: int):
        result = db.execute(select(Property).where(Property.id == property_id))
        property = result.scalar_one_or_none()

        if not property:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Property not found",
            )
        return property

    async def update_property(
        self, db: Session, property_id: int, property_data: PropertyUpdate
    ):
        property = await self.get_property(db, property_id)

        update_data = property_data.model_dump(exclude_unset=True)
        if "location_id" in update_data:
            self._ensure_location(db, update_data["location_id"])

        changes = _apply_changes(property, update_data)
        db.commit()
        db.refresh(property)
        return property, changes

    async def delete_property(
        self,
        db: Session,
        property_id: int,
        image_service: Optional[ImageService] = None,
    ):
        """Delete a property with its units and images, then their stored bytes."""
        property = await self.get_property(db, property_id)

        images = [(image.object_key, image.storage_type) for image in property.images]
        for unit in property.units:
            images.extend((image.object_key, image.storage_type) for image in unit.images)

        db.delete(property)
        db.commit()

        await _delete_image_bytes(image_service, images)
        logger.info(f"Deleted property {property_id} and {len(images)} images")
        return {"detail": "Property deleted successfully"}


class UnitService:
    def _refresh_unit_count(self, db: Session, property: Property):
        db.flush()
        property.unit_count = db.execute(
            select(func.count())
            .select_from(PropertyUnit)
            .where(PropertyUnit.property_id == property.id)
        ).scalar_one()

    async def get_units(self, db: Session, property_id: int):
        await PropertyService().get_property(db, property_id)
        result = db.execute(
            select(PropertyUnit)
            .where(PropertyUnit.property_id == property_id)
            .order_by(PropertyUnit.unit_number, PropertyUnit.id)
        )
        return result.scalars().all()

    async def get_unit(self, db: Session, unit_id: int):
        unit = db.get(PropertyUnit, unit_id)
        if not unit:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Property unit not found",
            )
        return unit

    async def create_unit(self, db: Session, unit_data: UnitCreate):
        property = await PropertyService().get_property(db, unit_data.property_id)
        if not property.is_multifamily:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot add units to non-multifamily property",
            )

        unit = PropertyUnit(**unit_data.model_dump())
        db.add(unit)
        self._refresh_unit_count(db, property)
        db.commit()
        db.refresh(unit)
        return unit

    async def update_unit(self, db: Session, unit_id: int, unit_data: UnitUpdate):
        unit = await self.get_unit(db, unit_id)
        changes = _apply_changes(unit, unit_data.model_dump(exclude_unset=True))
        db.commit()
        db.refresh(unit)
        return unit, changes

    async def delete_unit(
        self,
        db: Session,
        unit_id: int,
        image_service: Optional[ImageService] = None,
    ):
        unit = await self.get_unit(db, unit_id)
        property = unit.property
        images = [(image.object_key, image.storage_type) for image in unit.images]

        db.delete(unit)
        self._refresh_unit_count(db, property)
        db.commit()

        await _delete_image_bytes(image_service, images)
        return {"detail": "Property unit deleted successfully"}
