from homestead.routers.owned_images import build_image_router
from homestead.schemas.image import PropertyImageCreate, PropertyImageResponse
from homestead.services.image_record_service import ImageRecordService

router = build_image_router(
    prefix="/api/property-images",
    resource_type="property_image",
    owner_field="property_id",
    service_factory=ImageRecordService.for_properties,
    create_model=PropertyImageCreate,
    response_model=PropertyImageResponse,
)
