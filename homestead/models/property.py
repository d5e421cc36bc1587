from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Float,
    Boolean,
    ForeignKey,
    JSON,
    Enum,
)
from sqlalchemy.orm import relationship
from homestead.database import Base
import enum


class PropertyType(str, enum.Enum):
    SINGLE_FAMILY = "single-family"
    MULTI_FAMILY = "multi-family"
    TOWNHOME = "townhome"


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    address = Column(String(500), nullable=False)

    # Details
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Float, nullable=False)
    sqft = Column(Integer, nullable=False)
    rent = Column(Integer, nullable=True)
    available = Column(Boolean, default=True, nullable=False)
    property_type = Column(
        Enum(
            PropertyType,
            values_callable=lambda obj: [e.value for e in obj],
            native_enum=False,
        ),
        default=PropertyType.MULTI_FAMILY,
        nullable=False,
    )
    is_multifamily = Column(Boolean, default=False, nullable=False)
    unit_count = Column(Integer, default=0)

    image_url = Column(String(1000), nullable=False)
    features = Column(JSON, nullable=True)  # ["in-unit laundry", "parking"]

    location_id = Column(
        Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    location = relationship("Location", back_populates="properties")
    units = relationship(
        "PropertyUnit", back_populates="property", cascade="all, delete-orphan"
    )
    images = relationship(
        "PropertyImage", back_populates="property", cascade="all, delete-orphan"
    )
