from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from homestead.database import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(1000), nullable=False)
    link_text = Column(String(200), nullable=False)

    # Relationships
    properties = relationship("Property", back_populates="location")
    neighborhood = relationship(
        "Neighborhood",
        back_populates="location",
        uselist=False,
        cascade="all, delete-orphan",
    )
