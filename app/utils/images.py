import hashlib
import os
from typing import Optional, Set, Tuple
from uuid import uuid4

import filetype

# Allow-list des types d'image acceptés à l'upload
ALLOWED_IMAGE_MIME: Set[str] = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/avif",
    "image/bmp",
}

FALLBACK_MIME = "application/octet-stream"


def detect_mime_and_ext(file_bytes: bytes, declared: Optional[str] = None) -> Tuple[str, str]:
    """
    Détecte le type réel via 'filetype'.
    Retourne (real_mime, ext_with_dot) ; le type déclaré sert de repli.
    """
    kind = filetype.guess(file_bytes)
    if kind:
        return kind.mime, "." + kind.extension
    return (declared or FALLBACK_MIME), ".bin"


def validate_image_bytes(
    file_bytes: bytes,
    *,
    max_mb: int,
    declared: Optional[str] = None,
) -> Tuple[str, str, int, str]:
    """
    Retourne (real_mime, ext_with_dot, size_bytes, sha256).
    Lève ValueError si invalide.
    """
    size = len(file_bytes)
    if size == 0:
        raise ValueError("Empty image")
    if size > max_mb * 1024 * 1024:
        raise ValueError(f"Image too large (max {max_mb} MB)")

    real_mime, ext = detect_mime_and_ext(file_bytes, declared)
    if real_mime not in ALLOWED_IMAGE_MIME:
        raise ValueError(f"Unsupported image type: {real_mime}")

    sha = hashlib.sha256(file_bytes).hexdigest()
    return real_mime, ext, size, sha


def build_stored_filename(ext_with_dot: str) -> str:
    """Nom de fichier unique pour le stockage disque : <uuid><ext>."""
    ext = ext_with_dot if ext_with_dot.startswith(".") else f".{ext_with_dot}"
    return f"{uuid4().hex}{ext}"


def safe_basename(filename: Optional[str]) -> str:
    """Nom de fichier d'origine nettoyé (sans chemin), pour les métadonnées."""
    name = os.path.basename((filename or "").replace("\\", "/"))
    return name or "upload"
