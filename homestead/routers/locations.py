from fastapi import APIRouter, Request
from typing import List
from starlette import status

from homestead.dependencies import db_dependency
from homestead.schemas.location import (
    LocationCreate,
    LocationResponse,
    NeighborhoodCreate,
    NeighborhoodResponse,
    NeighborhoodUpdate,
)
from homestead.schemas.property import PropertyResponse
from homestead.services.audit_log_service import AuditLogService
from homestead.services.location_service import LocationService

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("/", response_model=List[LocationResponse])
async def get_locations(db: db_dependency):
    return await LocationService().get_locations(db)


@router.post("/", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    db: db_dependency, location: LocationCreate, request: Request
):
    result = await LocationService().create_location(db, location)
    AuditLogService().record(
        db,
        request,
        action="location.create",
        resource_type="location",
        resource_id=result.id,
        status_code=status.HTTP_201_CREATED,
    )
    return result


@router.get("/{slug}", response_model=LocationResponse)
async def get_location(db: db_dependency, slug: str):
    return await LocationService().get_location(db, slug)


@router.get("/{slug}/properties", response_model=List[PropertyResponse])
async def get_location_properties(db: db_dependency, slug: str):
    return await LocationService().get_location_properties(db, slug)


@router.get("/{slug}/neighborhood", response_model=NeighborhoodResponse)
async def get_neighborhood(db: db_dependency, slug: str):
    return await LocationService().get_neighborhood(db, slug)


@router.post(
    "/{slug}/neighborhood",
    response_model=NeighborhoodResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_neighborhood(
    db: db_dependency, slug: str, neighborhood: NeighborhoodCreate, request: Request
):
    result = await LocationService().create_neighborhood(db, slug, neighborhood)
    AuditLogService().record(
        db,
        request,
        action="neighborhood.create",
        resource_type="neighborhood",
        resource_id=result.id,
        status_code=status.HTTP_201_CREATED,
    )
    return result


@router.patch("/{slug}/neighborhood", response_model=NeighborhoodResponse)
async def update_neighborhood(
    db: db_dependency, slug: str, neighborhood: NeighborhoodUpdate, request: Request
):
    result, changes = await LocationService().update_neighborhood(
        db, slug, neighborhood
    )
    AuditLogService().record(
        db,
        request,
        action="neighborhood.update",
        resource_type="neighborhood",
        resource_id=result.id,
        changes=changes,
    )
    return result
