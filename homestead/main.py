from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, OperationalError
from starlette import status
from homestead.database import Base, engine
from homestead.config import settings
from homestead.Middleware.audit_middleware import audit_log_middleware
from homestead import models  # noqa: F401
from homestead.limits import limiter, RateLimitExceeded, SlowAPIMiddleware
from homestead.services.object_storage import ObjectStorageClient
from slowapi import _rate_limit_exceeded_handler
import logging

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


from homestead.routers import (
    admin,
    features,
    images,
    inquiries,
    locations,
    properties,
    property_images,
    storage,
    unit_images,
    units,
    uploads,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = ObjectStorageClient()
    app.state.object_store = store
    if not await store.check_config():
        logger.warning(
            "Object storage is not reachable; images will be served from the database only"
        )
    yield


app = FastAPI(title="Homestead", lifespan=lifespan)
app.middleware("http")(audit_log_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Page", "X-Limit", "X-Total-Pages"],
)

# Rate limiting middleware and handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(OperationalError)
async def database_operational_error_handler(request: Request, exc: OperationalError):
    """Handle database connection/operation errors"""
    logger.error(f"Database operational error: {exc}", exc_info=True)
    error_msg = str(exc).lower()

    if "could not connect" in error_msg or "connection" in error_msg:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": "Database connection error. Please try again.",
                "error": "database_connection_error",
            },
        )
    elif "timeout" in error_msg:
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content={
                "detail": "Database query timeout. Please try again.",
                "error": "database_timeout",
            },
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error": "database_error"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general SQLAlchemy errors"""
    logger.error(f"Database error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error": "database_error"},
    )


# Only create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
if settings.DATABASE_URL.startswith("sqlite"):
    Base.metadata.create_all(bind=engine)


@app.get("/healthy", status_code=status.HTTP_200_OK)
def health_check():
    return {"status": "Healthy"}


app.include_router(images.router)
app.include_router(property_images.router)
app.include_router(unit_images.router)
app.include_router(locations.router)
app.include_router(properties.router)
app.include_router(units.router)
app.include_router(features.router)
app.include_router(inquiries.router)
app.include_router(admin.router)
app.include_router(uploads.router)
app.include_router(storage.router)
