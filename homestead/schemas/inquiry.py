from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from homestead.models.inquiry import InquiryStatus


class InquiryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    message: str = Field(..., min_length=1)
    property_id: Optional[int] = None
    property_name: Optional[str] = Field(None, max_length=200)


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


class InquiryResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    property_id: Optional[int] = None
    property_name: Optional[str] = None
    status: InquiryStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
