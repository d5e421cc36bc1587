from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from homestead.database import Base
import enum


class InquiryStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    RESOLVED = "resolved"


class Inquiry(Base):
    __tablename__ = "inquiries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False)
    phone = Column(String(50), nullable=True)
    message = Column(Text, nullable=False)
    property_id = Column(
        Integer, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    property_name = Column(String(200), nullable=True)
    status = Column(
        Enum(
            InquiryStatus,
            values_callable=lambda obj: [e.value for e in obj],
            native_enum=False,
        ),
        default=InquiryStatus.NEW,
        nullable=False,
    )
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
