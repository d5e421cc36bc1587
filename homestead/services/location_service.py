from sqlalchemy import select
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from homestead.models.location import Location
from homestead.models.neighborhood import Neighborhood
from homestead.models.property import Property
from homestead.schemas.location import (
    LocationCreate,
    NeighborhoodCreate,
    NeighborhoodUpdate,
)


class LocationService:
    async def get_locations(self, db: Session):
        result = db.execute(select(Location).order_by(Location.id))
        return result.scalars().all()

    async def get_location(self, db: Session, slug: str):
        result = db.execute(select(Location).where(Location.slug == slug))
        location = result.scalar_one_or_none()

        if not location:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Location not found",
            )
        return location

    async def create_location(self, db: Session, location_data: LocationCreate):
        existing = db.execute(
            select(Location.id).where(Location.slug == location_data.slug)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Location with slug '{location_data.slug}' already exists",
            )

        location = Location(**location_data.model_dump())
        db.add(location)
        db.commit()
        db.refresh(location)
        return location

    async def get_location_properties(self, db: Session, slug: str):
        location = await self.get_location(db, slug)
        result = db.execute(
            select(Property)
            .where(Property.location_id == location.id)
            .order_by(Property.id)
        )
        return result.scalars().all()

    async def get_neighborhood(self, db: Session, slug: str):
        location = await self.get_location(db, slug)
        if not location.neighborhood:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Neighborhood information not found",
            )
        return location.neighborhood

    async def create_neighborhood(
        self, db: Session, slug: str, neighborhood_data: NeighborhoodCreate
    ):
        location = await self.get_location(db, slug)
        if location.neighborhood:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Neighborhood information already exists for this location",
            )

        neighborhood = Neighborhood(
            **neighborhood_data.model_dump(), location_id=location.id
        )
        db.add(neighborhood)
        db.commit()
        db.refresh(neighborhood)
        return neighborhood

    async def update_neighborhood(
        self, db: Session, slug: str, neighborhood_data: NeighborhoodUpdate
    ):
        neighborhood = await self.get_neighborhood(db, slug)

        changes = {}
        for key, value in neighborhood_data.model_dump(exclude_unset=True).items():
            old = getattr(neighborhood, key)
            if old != value:
                changes[key] = {"old": old, "new": value}
            setattr(neighborhood, key, value)

        db.commit()
        db.refresh(neighborhood)
        return neighborhood, changes
