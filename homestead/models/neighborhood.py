from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from homestead.database import Base


class Neighborhood(Base):
    __tablename__ = "neighborhoods"

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(
        Integer,
        ForeignKey("locations.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    map_image_url = Column(String(1000), nullable=True)
    highlights = Column(Text, nullable=True)
    attractions = Column(Text, nullable=True)
    transportation_info = Column(Text, nullable=True)
    dining_options = Column(Text, nullable=True)
    schools_info = Column(Text, nullable=True)
    parks_and_recreation = Column(Text, nullable=True)
    historical_info = Column(Text, nullable=True)

    # Explore section
    explore_description = Column(Text, nullable=True)
    explore_map_url = Column(String(1000), nullable=True)
    explore_hotspots = Column(JSON, nullable=True)  # [{"name": ..., "x": ..., "y": ...}]

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    location = relationship("Location", back_populates="neighborhood")
