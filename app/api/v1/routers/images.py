# app/api/v1/routers/images.py
import logging

from fastapi import APIRouter, Depends, Header, Response, status
from typing import Optional

from app.api.v1.dependencies import get_image_store
from app.features.media.stores import ImageStore

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"  # 1 an : une référence n'est jamais réutilisée

router = APIRouter(
    prefix="/images",
    tags=["images"],
    responses={404: {"description": "Not Found"}},
)


def etag_for(image_id: str) -> str:
    return f'"img-{image_id}"'


def _etag_matches(if_none_match: str, etag: str) -> bool:
    candidates = [c.strip() for c in if_none_match.split(",")]
    return "*" in candidates or etag in candidates or f"W/{etag}" in candidates


# -----------------------------
# Lecture
# -----------------------------
@router.get(
    "/{image_id}",
    summary="Lire une image",
    description="Retourne les octets de l'image. Supporte If-None-Match (ETag dérivé de l'identifiant).",
    response_class=Response,
    responses={
        200: {"content": {"image/*": {}}, "description": "Octets de l'image"},
        304: {"description": "Non modifiée"},
    },
)
def get_image(
    image_id: str,
    if_none_match: Optional[str] = Header(default=None, alias="If-None-Match"),
    store: ImageStore = Depends(get_image_store),
):
    # Image inconnue : 404 même si If-None-Match correspond
    image = store.get(image_id)
    etag = etag_for(image_id)
    if if_none_match and _etag_matches(if_none_match, etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})

    logger.debug("Serving image %s (%d bytes)", image_id, len(image.content))
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"ETag": etag, "Cache-Control": CACHE_CONTROL},
    )
