from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from homestead.models.property import PropertyType


class PropertyBase(BaseModel):
    name: str = Field(..., max_length=200)
    description: str
    address: str = Field(..., max_length=500)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    sqft: int = Field(..., gt=0)
    rent: Optional[int] = Field(None, ge=0)
    available: bool = True
    property_type: PropertyType = PropertyType.MULTI_FAMILY
    is_multifamily: bool = False
    image_url: str = Field(..., max_length=1000)
    features: Optional[List[str]] = None
    location_id: int


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    sqft: Optional[int] = Field(None, gt=0)
    rent: Optional[int] = Field(None, ge=0)
    available: Optional[bool] = None
    property_type: Optional[PropertyType] = None
    is_multifamily: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=1000)
    features: Optional[List[str]] = None
    location_id: Optional[int] = None


class PropertyResponse(PropertyBase):
    id: int
    unit_count: Optional[int] = 0

    model_config = ConfigDict(from_attributes=True)


class UnitBase(BaseModel):
    unit_number: str = Field(..., max_length=50)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    sqft: int = Field(..., gt=0)
    rent: Optional[int] = Field(None, ge=0)
    available: bool = True
    description: str = ""
    features: Optional[List[str]] = None


class UnitCreate(UnitBase):
    property_id: int


class UnitUpdate(BaseModel):
    unit_number: Optional[str] = Field(None, max_length=50)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    sqft: Optional[int] = Field(None, gt=0)
    rent: Optional[int] = Field(None, ge=0)
    available: Optional[bool] = None
    description: Optional[str] = None
    features: Optional[List[str]] = None


class UnitResponse(UnitBase):
    id: int
    property_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
