from fastapi import APIRouter, Request
from typing import List
from starlette import status

from homestead.dependencies import db_dependency
from homestead.limits import INQUIRY_LIMIT, limiter
from homestead.schemas.inquiry import (
    InquiryCreate,
    InquiryResponse,
    InquiryStatusUpdate,
)
from homestead.services.audit_log_service import AuditLogService
from homestead.services.inquiry_service import InquiryService

router = APIRouter(prefix="/api/inquiries", tags=["inquiries"])


@router.get("/", response_model=List[InquiryResponse])
async def get_inquiries(db: db_dependency):
    return await InquiryService().get_inquiries(db)


@router.post("/", response_model=InquiryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(INQUIRY_LIMIT)
async def create_inquiry(request: Request, db: db_dependency, inquiry: InquiryCreate):
    return await InquiryService().create_inquiry(db, inquiry)


@router.patch("/{inquiry_id}/status", response_model=InquiryResponse)
async def update_inquiry_status(
    db: db_dependency, inquiry_id: int, body: InquiryStatusUpdate, request: Request
):
    inquiry, old_status = await InquiryService().update_status(
        db, inquiry_id, body.status
    )
    AuditLogService().record(
        db,
        request,
        action="inquiry.status",
        resource_type="inquiry",
        resource_id=inquiry_id,
        changes={"status": {"old": old_status.value, "new": inquiry.status.value}},
    )
    return inquiry
