from fastapi import APIRouter, Query, Request, Response
from typing import List, Optional
from starlette import status

from homestead.dependencies import db_dependency, image_service_dependency
from homestead.models.property import PropertyType
from homestead.schemas.image import PropertyImageResponse
from homestead.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
    UnitResponse,
)
from homestead.services.audit_log_service import AuditLogService
from homestead.services.image_record_service import ImageRecordService
from homestead.services.property_service import PropertyService, UnitService

router = APIRouter(prefix="/api/properties", tags=["properties"])


@router.get("/", response_model=List[PropertyResponse])
async def get_properties(
    db: db_dependency,
    location_id: Optional[int] = Query(None, description="Filter by location"),
    property_type: Optional[PropertyType] = Query(None, description="Type of property"),
    available: Optional[bool] = Query(None, description="Only available properties"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    return await PropertyService().get_properties(
        db,
        location_id=location_id,
        property_type=property_type,
        available=available,
        skip=skip,
        limit=limit,
    )


@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    db: db_dependency, property: PropertyCreate, request: Request
):
    result = await PropertyService().create_property(db, property)
    AuditLogService().record(
        db,
        request,
        action="property.create",
        resource_type="property",
        resource_id=result.id,
        status_code=status.HTTP_201_CREATED,
    )
    return result


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(db: db_dependency, property_id: int):
    return await PropertyService().get_property(db, property_id)


@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(
    db: db_dependency, property_id: int, property: PropertyUpdate, request: Request
):
    result, changes = await PropertyService().update_property(
        db, property_id, property
    )
    AuditLogService().record(
        db,
        request,
        action="property.update",
        resource_type="property",
        resource_id=property_id,
        changes=changes,
    )
    return result


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    db: db_dependency,
    image_service: image_service_dependency,
    property_id: int,
    request: Request,
):
    await PropertyService().delete_property(db, property_id, image_service)
    AuditLogService().record(
        db,
        request,
        action="property.delete",
        resource_type="property",
        resource_id=property_id,
        status_code=status.HTTP_204_NO_CONTENT,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{property_id}/images", response_model=List[PropertyImageResponse])
async def get_property_images(db: db_dependency, property_id: int):
    service = ImageRecordService.for_properties(db)
    service.ensure_owner(property_id)
    return service.list_for_owner(property_id)


@router.get("/{property_id}/units", response_model=List[UnitResponse])
async def get_property_units(db: db_dependency, property_id: int):
    return await UnitService().get_units(db, property_id)
