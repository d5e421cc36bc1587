from fastapi import APIRouter, Request, Response
from typing import List
from starlette import status

from homestead.dependencies import db_dependency, image_service_dependency
from homestead.schemas.image import UnitImageResponse
from homestead.schemas.property import UnitCreate, UnitResponse, UnitUpdate
from homestead.services.audit_log_service import AuditLogService
from homestead.services.image_record_service import ImageRecordService
from homestead.services.property_service import UnitService

router = APIRouter(prefix="/api/property-units", tags=["property_units"])


@router.post("/", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
async def create_unit(db: db_dependency, unit: UnitCreate, request: Request):
    result = await UnitService().create_unit(db, unit)
    AuditLogService().record(
        db,
        request,
        action="property_unit.create",
        resource_type="property_unit",
        resource_id=result.id,
        status_code=status.HTTP_201_CREATED,
    )
    return result


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(db: db_dependency, unit_id: int):
    return await UnitService().get_unit(db, unit_id)


@router.patch("/{unit_id}", response_model=UnitResponse)
async def update_unit(
    db: db_dependency, unit_id: int, unit: UnitUpdate, request: Request
):
    result, changes = await UnitService().update_unit(db, unit_id, unit)
    AuditLogService().record(
        db,
        request,
        action="property_unit.update",
        resource_type="property_unit",
        resource_id=unit_id,
        changes=changes,
    )
    return result


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_unit(
    db: db_dependency,
    image_service: image_service_dependency,
    unit_id: int,
    request: Request,
):
    await UnitService().delete_unit(db, unit_id, image_service)
    AuditLogService().record(
        db,
        request,
        action="property_unit.delete",
        resource_type="property_unit",
        resource_id=unit_id,
        status_code=status.HTTP_204_NO_CONTENT,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{unit_id}/images", response_model=List[UnitImageResponse])
async def get_unit_images(db: db_dependency, unit_id: int):
    service = ImageRecordService.for_units(db)
    service.ensure_owner(unit_id)
    return service.list_for_owner(unit_id)
