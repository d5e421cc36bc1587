from fastapi import APIRouter
from sqlalchemy import select
from typing import List

from homestead.dependencies import db_dependency
from homestead.models.feature import Feature
from homestead.schemas.feature import FeatureResponse

router = APIRouter(prefix="/api/features", tags=["features"])


@router.get("/", response_model=List[FeatureResponse])
async def get_features(db: db_dependency):
    return db.execute(select(Feature).order_by(Feature.id)).scalars().all()
