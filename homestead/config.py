from pydantic_settings import BaseSettings, NoDecode
from pydantic import ConfigDict, field_validator
from typing import Annotated
import json


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./homestead.db"

    # Object storage (Cloudinary raw resources)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    OBJECT_STORAGE_BUCKET_ID: str = "homestead-images"
    OBJECT_STORAGE_PUBLIC_URL: str = "https://res.cloudinary.com"
    OBJECT_STORAGE_TIMEOUT: int = 30

    # Images
    IMAGE_FOLDER: str = "images"
    IMAGE_BACKEND: str = "database"  # "database" or "object-storage"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    UPLOADS_DIR: str = "uploads"
    PLACEHOLDER_IMAGE_URL: str = "/placeholder-image.jpg"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("IMAGE_BACKEND")
    @classmethod
    def check_image_backend(cls, v):
        if v not in ("database", "object-storage"):
            raise ValueError(
                f"IMAGE_BACKEND must be 'database' or 'object-storage', got {v!r}"
            )
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON list or a comma-separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    raise ValueError(f"Invalid JSON in CORS_ORIGINS: {v}")
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
