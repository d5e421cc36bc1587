from fastapi import APIRouter
from fastapi.responses import FileResponse

from homestead.services.image_service import guess_content_type
from homestead.services.legacy_uploads import resolve_upload_path

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.get("/{filename}")
async def get_legacy_upload(filename: str):
    path = resolve_upload_path(filename)
    return FileResponse(
        path,
        media_type=guess_content_type(filename),
        headers={"Cache-Control": "public, max-age=86400"},
    )
