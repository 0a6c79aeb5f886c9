from typing import Optional

from sqlalchemy import Column, LargeBinary
from sqlmodel import Field

from .base import BaseModelDB

class Image(BaseModelDB, table=True):
    """Images stockées directement en base (backend `database` de l'ImageStore)."""

    filename: str = Field(description="Nom du fichier d'origine")
    data: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    content_type: str = Field(description="Type MIME (image/jpeg, image/png, etc.)")
    size: int = Field(description="Taille en octets")
    sha256: Optional[str] = Field(default=None, index=True)
