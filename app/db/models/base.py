"""
Colonnes communes à toutes les tables : id auto-incrémenté, created_at et updated_at en UTC.

Les dates sont "aware" (timezone UTC) ; updated_at est repositionné par les services à chaque modification.
"""

from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModelDB(SQLModel, table=False):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
