from typing import List, Optional
from sqlalchemy import desc, select
from sqlalchemy.orm import Session, defer
from homestead.models.image_storage import ImageStorage


class BlobRepository:
    """Image bytes kept in the ``image_storage`` table.

    Keys here were chosen by the application at write time, so lookups are
    exact; none of the resolver's key variants apply.
    """

    def __init__(self, db: Session):
        self.db = db

    def save(self, object_key: str, data: bytes, mime_type: str) -> ImageStorage:
        blob = ImageStorage(
            object_key=object_key, data=data, mime_type=mime_type, size=len(data)
        )
        self.db.add(blob)
        self.db.commit()
        self.db.refresh(blob)
        return blob

    def get_by_object_key(self, object_key: str) -> Optional[ImageStorage]:
        return self.db.execute(
            select(ImageStorage).where(ImageStorage.object_key == object_key)
        ).scalar_one_or_none()

    def delete_by_object_key(self, object_key: str) -> bool:
        blob = self.get_by_object_key(object_key)
        if not blob:
            return False
        self.db.delete(blob)
        self.db.commit()
        return True

    def list_all(self) -> List[ImageStorage]:
        return (
            self.db.execute(
                select(ImageStorage)
                .options(defer(ImageStorage.data))
                .order_by(
                    desc(ImageStorage.created_at), desc(ImageStorage.id)
                )
            )
            .scalars()
            .all()
        )
