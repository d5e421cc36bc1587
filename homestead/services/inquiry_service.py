from sqlalchemy import desc, select
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from homestead.models.inquiry import Inquiry, InquiryStatus
from homestead.models.property import Property
from homestead.schemas.inquiry import InquiryCreate


class InquiryService:
    async def get_inquiries(self, db: Session):
        result = db.execute(
            select(Inquiry).order_by(desc(Inquiry.created_at), desc(Inquiry.id))
        )
        return result.scalars().all()

    async def create_inquiry(self, db: Session, inquiry_data: InquiryCreate):
        data = inquiry_data.model_dump()

        # Fill in the property name for inquiries sent from a listing page
        if data.get("property_id") is not None:
            property = db.get(Property, data["property_id"])
            if not property:
                data["property_id"] = None
            elif not data.get("property_name"):
                data["property_name"] = property.name

        inquiry = Inquiry(**data, status=InquiryStatus.NEW)
        db.add(inquiry)
        db.commit()
        db.refresh(inquiry)
        return inquiry

    async def update_status(
        self, db: Session, inquiry_id: int, new_status: InquiryStatus
    ):
        inquiry = db.get(Inquiry, inquiry_id)
        if not inquiry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Inquiry not found",
            )

        old_status = inquiry.status
        inquiry.status = new_status
        db.commit()
        db.refresh(inquiry)
        return inquiry, old_status
