"""
➡️ But : Définir la structure des tables de la base (ORM).

Représente les comptes utilisateurs : identifiants locaux (email + hash bcrypt)
et/ou liaison avec un fournisseur OAuth.

- `email` est unique : c'est la clé de dédoublonnage entre les modes de connexion.
- `hashed_password` est vide pour un compte créé via OAuth.
- (`oauth_provider`, `oauth_provider_id`) est unique quand renseigné.
"""

from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from .base import BaseModelDB

class User(BaseModelDB, table=True):
    __table_args__ = (
        UniqueConstraint("oauth_provider", "oauth_provider_id", name="uq_user_oauth_identity"),
    )

    username: str = Field(index=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str = Field(default="")
    oauth_provider: Optional[str] = Field(default=None, index=True)
    oauth_provider_id: Optional[str] = Field(default=None)
