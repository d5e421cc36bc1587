from fastapi import APIRouter

from homestead.dependencies import object_store_dependency

router = APIRouter(prefix="/api/storage", tags=["storage"])


@router.get("/check-config")
async def check_storage_config(store: object_store_dependency):
    """Whether the object store is reachable with the configured credentials."""
    return {"configured": await store.check_config(), "bucket_id": store.bucket_id}
