# app/db/repositories/images.py
from app.db.repositories.base import BaseRepository
from app.db.models.images import Image

class ImageRepository(BaseRepository[Image]):
    """CRUD Images (backend `database` de l'ImageStore)."""
    model = Image
