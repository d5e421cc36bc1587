from sqlalchemy import Column, Integer, String, DateTime, LargeBinary
from sqlalchemy.sql import func
from homestead.database import Base


class ImageStorage(Base):
    __tablename__ = "image_storage"

    id = Column(Integer, primary_key=True, index=True)
    object_key = Column(String(500), unique=True, index=True, nullable=False)
    data = Column(LargeBinary, nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
