"""
➡️ But : Définir le contrat de stockage des images et ses implémentations.

ImageStore (Protocol) : save / get / delete, avec une référence opaque (str).

DatabaseImageStore : octets stockés dans la table `image` (référence = id de la ligne).

FileImageStore : octets écrits dans UPLOAD_DIR (référence = nom du fichier).

Le backend est choisi au démarrage (settings.IMAGE_STORAGE) ;
le service des todos ne dépend que du contrat.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from app.core.errors import InternalError, NotFoundError, ValidationError
from app.db.repositories.images import ImageRepository
from app.utils.images import (
    build_stored_filename,
    detect_mime_and_ext,
    safe_basename,
    validate_image_bytes,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    """Image reçue dans une requête (multipart), déjà lue en mémoire."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class StoredImage:
    reference: str
    content: bytes
    content_type: str
    created_at: Optional[datetime] = None


class ImageStore(Protocol):
    def save(self, upload: ImageUpload) -> str: ...

    def get(self, reference: str) -> StoredImage: ...

    def delete(self, reference: str) -> None: ...


def check_upload(upload: ImageUpload, *, max_mb: int):
    """Valide une image avant toute écriture ; lève ValidationError."""
    try:
        return validate_image_bytes(upload.content, max_mb=max_mb, declared=upload.content_type)
    except ValueError as e:
        raise ValidationError(str(e)) from e


class DatabaseImageStore:
    """Images en base, via ImageRepository."""

    def __init__(self, repo: ImageRepository, *, max_mb: int = 10):
        self.repo = repo
        self.max_mb = max_mb

    @staticmethod
    def _parse_reference(reference: str) -> int:
        try:
            image_id = int(reference)
        except (TypeError, ValueError):
            raise NotFoundError("Image not found")
        if image_id <= 0:
            raise NotFoundError("Image not found")
        return image_id

    def save(self, upload: ImageUpload) -> str:
        mime, _ext, size, sha = check_upload(upload, max_mb=self.max_mb)
        img = self.repo.create(
            filename=safe_basename(upload.filename),
            data=upload.content,
            content_type=mime,
            size=size,
            sha256=sha,
        )
        logger.info("Stored image id=%s (%d bytes)", img.id, size)
        return str(img.id)

    def get(self, reference: str) -> StoredImage:
        img = self.repo.get(self._parse_reference(reference))
        if not img or not img.data:
            raise NotFoundError("Image not found")
        content_type = img.content_type or detect_mime_and_ext(img.data)[0]
        return StoredImage(
            reference=str(img.id),
            content=img.data,
            content_type=content_type,
            created_at=img.created_at,
        )

    def delete(self, reference: str) -> None:
        img = self.repo.get(self._parse_reference(reference))
        if not img:
            raise NotFoundError("Image not found")
        self.repo.delete(img)
        logger.info("Deleted image id=%s", reference)


class FileImageStore:
    """Images sur disque, dans un répertoire d'upload dédié."""

    def __init__(self, upload_dir: str, *, max_mb: int = 10):
        self.root = Path(upload_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.max_mb = max_mb

    def _path_for(self, reference: str) -> Path:
        # Référence = simple nom de fichier ; tout chemin qui sort du répertoire est inconnu
        if not reference or os.path.basename(reference) != reference or reference in (".", ".."):
            raise NotFoundError("Image not found")
        path = (self.root / reference).resolve()
        if path.parent != self.root:
            raise NotFoundError("Image not found")
        return path

    def save(self, upload: ImageUpload) -> str:
        _mime, ext, size, _sha = check_upload(upload, max_mb=self.max_mb)
        reference = build_stored_filename(ext)
        path = self.root / reference
        try:
            with open(path, "xb") as fh:
                fh.write(upload.content)
        except OSError as e:
            raise InternalError("Failed to store image") from e
        logger.info("Stored image file=%s (%d bytes)", reference, size)
        return reference

    def get(self, reference: str) -> StoredImage:
        path = self._path_for(reference)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError("Image not found")
        except OSError as e:
            raise InternalError("Failed to read image") from e
        if not content:
            raise NotFoundError("Image not found")
        mime, _ext = detect_mime_and_ext(content)
        created_at = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
        return StoredImage(reference=reference, content=content, content_type=mime, created_at=created_at)

    def delete(self, reference: str) -> None:
        path = self._path_for(reference)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError("Image not found")
        except OSError as e:
            raise InternalError("Failed to delete image") from e
        logger.info("Deleted image file=%s", reference)
