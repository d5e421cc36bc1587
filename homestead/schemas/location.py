from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional
from datetime import datetime


class LocationBase(BaseModel):
    slug: str = Field(..., max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    name: str = Field(..., max_length=200)
    description: str
    image_url: str = Field(..., max_length=1000)
    link_text: str = Field(..., max_length=200)


class LocationCreate(LocationBase):
    pass


class LocationResponse(LocationBase):
    id: int
    slug: str

    model_config = ConfigDict(from_attributes=True)


class NeighborhoodBase(BaseModel):
    map_image_url: Optional[str] = Field(None, max_length=1000)
    highlights: Optional[str] = None
    attractions: Optional[str] = None
    transportation_info: Optional[str] = None
    dining_options: Optional[str] = None
    schools_info: Optional[str] = None
    parks_and_recreation: Optional[str] = None
    historical_info: Optional[str] = None
    explore_description: Optional[str] = None
    explore_map_url: Optional[str] = Field(None, max_length=1000)
    explore_hotspots: Optional[List[dict[str, Any]]] = None


class NeighborhoodCreate(NeighborhoodBase):
    pass


class NeighborhoodUpdate(NeighborhoodBase):
    pass


class NeighborhoodResponse(NeighborhoodBase):
    id: int
    location_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
