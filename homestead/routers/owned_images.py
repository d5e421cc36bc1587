"""Routes shared by property images and unit images.

Both resources have the same operations and differ only in the owner they
hang off, so each router is built from the same handlers.
"""

import math
from typing import List, Optional, Type

from fastapi import APIRouter, File, Form, HTTPException, Query, Request, Response, UploadFile
from pydantic import BaseModel
from starlette import status

from homestead.dependencies import db_dependency, image_service_dependency
from homestead.limits import UPLOAD_LIMIT, limiter
from homestead.schemas.image import (
    ImageDirection,
    ImageFeaturedUpdate,
    ImageOrderUpdate,
    StorageBackend,
)
from homestead.services.audit_log_service import AuditLogService
from homestead.services.image_service import CACHE_CONTROL


def build_image_router(
    prefix: str,
    resource_type: str,
    owner_field: str,
    service_factory,
    create_model: Type[BaseModel],
    response_model: Type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[resource_type])

    @router.get("/", response_model=List[response_model])
    async def list_images(
        db: db_dependency,
        response: Response,
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1, le=100),
    ):
        rows, total = service_factory(db).list_page(page=page, limit=limit)
        response.headers["X-Total-Count"] = str(total)
        response.headers["X-Page"] = str(page)
        response.headers["X-Limit"] = str(limit)
        response.headers["X-Total-Pages"] = str(math.ceil(total / limit))
        return rows

    @router.get("/{image_id:int}", response_model=response_model)
    async def get_image(db: db_dependency, image_id: int):
        return service_factory(db).get_image(image_id)

    @router.get("/{key:path}")
    async def get_image_data(
        db: db_dependency, image_service: image_service_dependency, key: str
    ):
        """Serve the bytes of an image this resource owns, by object key."""
        service_factory(db).get_by_object_key(key)
        image = await image_service.fetch(key)
        if not image:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Image data not found",
            )
        return Response(
            content=image.data,
            media_type=image.content_type,
            headers={"Cache-Control": CACHE_CONTROL},
        )

    @router.post("/", response_model=response_model, status_code=status.HTTP_201_CREATED)
    async def create_image(
        db: db_dependency,
        image_service: image_service_dependency,
        payload: create_model,
        request: Request,
    ):
        image = await service_factory(db).create_image(
            getattr(payload, owner_field), payload, image_service
        )
        AuditLogService().record(
            db,
            request,
            action=f"{resource_type}.create",
            resource_type=resource_type,
            resource_id=image.id,
            status_code=status.HTTP_201_CREATED,
        )
        return image

    async def upload_image(
        request: Request,
        db: db_dependency,
        image_service: image_service_dependency,
        owner_id: int = Form(..., alias=owner_field),
        file: UploadFile = File(...),
        alt: str = Form(""),
        display_order: Optional[int] = Form(None, ge=0),
        is_featured: bool = Form(False),
        storage: Optional[StorageBackend] = Form(None),
    ):
        image = await service_factory(db).create_from_upload(
            owner_id,
            file,
            image_service,
            alt=alt,
            display_order=display_order,
            is_featured=is_featured,
            storage=storage,
        )
        AuditLogService().record(
            db,
            request,
            action=f"{resource_type}.upload",
            resource_type=resource_type,
            resource_id=image.id,
            status_code=status.HTTP_201_CREATED,
        )
        return image

    # Rate limits are keyed by function name, one bucket per owner type
    upload_image.__name__ = f"upload_{resource_type}"
    router.post(
        "/upload", response_model=response_model, status_code=status.HTTP_201_CREATED
    )(limiter.limit(UPLOAD_LIMIT)(upload_image))

    @router.patch("/{image_id}/order", response_model=response_model)
    async def update_order(
        db: db_dependency, image_id: int, body: ImageOrderUpdate, request: Request
    ):
        service = service_factory(db)
        old_order = service.get_image(image_id).display_order
        image = service.set_order(image_id, body.display_order)
        AuditLogService().record(
            db,
            request,
            action=f"{resource_type}.reorder",
            resource_type=resource_type,
            resource_id=image_id,
            changes={"display_order": {"old": old_order, "new": image.display_order}},
        )
        return image

    @router.patch("/{image_id}/featured", response_model=response_model)
    async def update_featured(
        db: db_dependency, image_id: int, body: ImageFeaturedUpdate, request: Request
    ):
        image = service_factory(db).set_featured(image_id, body.is_featured)
        AuditLogService().record(
            db,
            request,
            action=f"{resource_type}.featured",
            resource_type=resource_type,
            resource_id=image_id,
            changes={"is_featured": {"new": image.is_featured}},
        )
        return image

    @router.post("/{image_id}/move", response_model=response_model)
    async def move_image(
        db: db_dependency,
        image_id: int,
        request: Request,
        direction: ImageDirection = Query(...),
    ):
        image = service_factory(db).move(image_id, direction)
        AuditLogService().record(
            db,
            request,
            action=f"{resource_type}.move",
            resource_type=resource_type,
            resource_id=image_id,
            changes={"direction": direction, "display_order": image.display_order},
        )
        return image

    @router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_image(
        db: db_dependency,
        image_service: image_service_dependency,
        image_id: int,
        request: Request,
    ):
        await service_factory(db).delete_image(image_id, image_service)
        AuditLogService().record(
            db,
            request,
            action=f"{resource_type}.delete",
            resource_type=resource_type,
            resource_id=image_id,
            status_code=status.HTTP_204_NO_CONTENT,
        )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
