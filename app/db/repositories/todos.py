from typing import Sequence
from sqlmodel import select

from app.db.repositories.base import BaseRepository
from app.db.models.todos import Todo

class TodoRepository(BaseRepository[Todo]):
    """CRUD Todos + requêtes filtrées par propriétaire."""
    model = Todo

    def list_for_user(self, user_id: int) -> Sequence[Todo]:
        """Todos d'un utilisateur, du plus récent au plus ancien."""
        return self.session.exec(
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        ).all()
