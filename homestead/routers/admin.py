from fastapi import APIRouter, Query, Request
from typing import List, Optional
from starlette import status

from homestead.dependencies import db_dependency, object_store_dependency
from homestead.schemas.audit_log import AuditLogResponse
from homestead.schemas.image import MigratedUpload
from homestead.services.audit_log_service import AuditLogService
from homestead.services.legacy_uploads import migrate_uploads

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post(
    "/migrate-uploads",
    response_model=List[MigratedUpload],
    status_code=status.HTTP_200_OK,
)
async def migrate_legacy_uploads(
    db: db_dependency, store: object_store_dependency, request: Request
):
    report = await migrate_uploads(db, store)
    migrated = [entry for entry in report if entry["status"] == "migrated"]
    AuditLogService().record(
        db,
        request,
        action="uploads.migrate",
        resource_type="image",
        changes={"migrated": len(migrated), "failed": len(report) - len(migrated)},
    )
    return report


@router.get("/audit-logs", response_model=List[AuditLogResponse])
def get_audit_logs(
    db: db_dependency,
    resource_type: Optional[str] = Query(None),
    resource_id: Optional[int] = Query(None),
    action: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    return AuditLogService().get_logs(
        db,
        resource_type=resource_type,
        resource_id=resource_id,
        action=action,
        skip=skip,
        limit=limit,
    )
