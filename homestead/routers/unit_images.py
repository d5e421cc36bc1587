from homestead.routers.owned_images import build_image_router
from homestead.schemas.image import UnitImageCreate, UnitImageResponse
from homestead.services.image_record_service import ImageRecordService

router = build_image_router(
    prefix="/api/unit-images",
    resource_type="unit_image",
    owner_field="unit_id",
    service_factory=ImageRecordService.for_units,
    create_model=UnitImageCreate,
    response_model=UnitImageResponse,
)
