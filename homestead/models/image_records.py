from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homestead.database import Base


class StorageType:
    DATABASE = "database"
    OBJECT_STORAGE = "object-storage"
    EXTERNAL = "external"


class ImageRecordMixin:
    """Columns shared by every image owned by a property or a unit.

    ``url`` holds whatever the client should render: an external URL, an
    ``/api/images/...`` proxy path or a bare object key. ``object_key`` is
    only set for bytes we store ourselves and ``storage_type`` says where.
    """

    # Name of the foreign key column pointing at the owner
    owner_field = None

    id = Column(Integer, primary_key=True, index=True)
    url = Column(String(1000), nullable=True)
    object_key = Column(String(500), nullable=True, index=True)
    storage_type = Column(String(20), default=StorageType.EXTERNAL, nullable=False)
    alt = Column(String(200), default="", nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    mime_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def owner_id(self):
        return getattr(self, self.owner_field)


class PropertyImage(ImageRecordMixin, Base):
    __tablename__ = "property_images"
    owner_field = "property_id"

    property_id = Column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )

    property = relationship("Property", back_populates="images")


class UnitImage(ImageRecordMixin, Base):
    __tablename__ = "unit_images"
    owner_field = "unit_id"

    unit_id = Column(
        Integer, ForeignKey("property_units.id", ondelete="CASCADE"), nullable=False, index=True
    )

    unit = relationship("PropertyUnit", back_populates="images")
