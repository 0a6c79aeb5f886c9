from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field

from .base import BaseModelDB

DEFAULT_STATUS = "pending"

class Todo(BaseModelDB, table=True):
    """Tâche d'un utilisateur, avec une image optionnelle (référence opaque)."""

    user_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Propriétaire du todo (immuable)",
    )
    title: str = Field(index=True)
    description: str = ""
    status: str = Field(default=DEFAULT_STATUS, max_length=32)
    image_reference: str = Field(default="", description="Référence de l'image dans l'ImageStore ('' = aucune)")
