from pydantic import Base64Bytes, BaseModel, ConfigDict, Field, computed_field
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
from homestead.services import image_urls

StorageBackend = Literal["database", "object-storage"]
ImageDirection = Literal["up", "down"]


class UrlImageSource(BaseModel):
    kind: Literal["url"]
    url: str = Field(..., max_length=1000, pattern=r"^https?://")


class InlineImageSource(BaseModel):
    kind: Literal["inline"]
    data: Base64Bytes
    content_type: str = Field(..., max_length=100)
    filename: Optional[str] = Field(None, max_length=255)


ImageSource = Annotated[
    Union[UrlImageSource, InlineImageSource], Field(discriminator="kind")
]


class ImageRecordBase(BaseModel):
    alt: str = Field(default="", max_length=200)
    display_order: Optional[int] = Field(None, ge=0)
    is_featured: bool = False
    storage: Optional[StorageBackend] = None
    source: ImageSource


class PropertyImageCreate(ImageRecordBase):
    property_id: int


class UnitImageCreate(ImageRecordBase):
    unit_id: int


class ImageOrderUpdate(BaseModel):
    display_order: int = Field(..., ge=0)


class ImageFeaturedUpdate(BaseModel):
    is_featured: bool


class ImageRecordResponse(BaseModel):
    id: int
    url: Optional[str] = None
    object_key: Optional[str] = None
    storage_type: str
    alt: str
    display_order: int
    is_featured: bool
    mime_type: Optional[str] = None
    size: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def display_url(self) -> str:
        return image_urls.display_url(self.url, self.object_key)


class PropertyImageResponse(ImageRecordResponse):
    property_id: int


class UnitImageResponse(ImageRecordResponse):
    unit_id: int


class StoredImage(BaseModel):
    key: str
    url: str
    source: StorageBackend
    mime_type: Optional[str] = None
    size: Optional[int] = None
    created_at: Optional[datetime] = None


class StoredImageCounts(BaseModel):
    database: int
    object_storage: int
    total: int


class StoredImageList(BaseModel):
    images: List[StoredImage]
    counts: StoredImageCounts


class MigratedUpload(BaseModel):
    filename: str
    object_key: Optional[str] = None
    updated_records: int = 0
    status: Literal["migrated", "failed"]
