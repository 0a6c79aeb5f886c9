"""
➡️ But : Contenir la logique métier des todos : propriété, cycle de vie todo + image.

TodoService :
- vérifie que l'appelant est propriétaire (ForbiddenError sinon),
- coordonne le stockage des todos et celui des images (deux stores sans transaction commune),
- applique une compensation "best-effort" en cas d'échec partiel :
  la suppression d'une image orpheline est tentée, son échec est journalisé, jamais propagé.

Ordre des écritures : l'image est stockée avant d'être liée, l'ancienne image
n'est supprimée qu'une fois la nouvelle stockée.

🔹 Avantages :

Code métier découplé du web.

Test unitaire possible sans passer par FastAPI (stores factices).
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.db.models.todos import DEFAULT_STATUS, Todo
from app.db.repositories.todos import TodoRepository
from app.features.media.stores import ImageStore, ImageUpload
from app.features.todos.schemas import TodoIn

logger = logging.getLogger(__name__)

TODO_NOT_FOUND = "Todo not found"


class TodoService:
    def __init__(
        self,
        *,
        repo: TodoRepository,
        images: ImageStore,
        now_fn: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.repo = repo
        self.images = images
        self.now_fn = now_fn

    # --------------- Helpers ---------------
    @staticmethod
    def _clean_fields(payload: TodoIn) -> dict:
        title = (payload.title or "").strip()
        if not title:
            raise ValidationError("title is required")
        return {
            "title": title,
            "description": payload.description or "",
            "status": (payload.status or "").strip() or DEFAULT_STATUS,
        }

    def _discard_image(self, reference: str, reason: str) -> None:
        """Suppression best-effort : l'échec est journalisé, jamais propagé."""
        if not reference:
            return
        try:
            self.images.delete(reference)
        except Exception:
            logger.warning("Could not delete image %r (%s); it may be orphaned", reference, reason, exc_info=True)

    # --------------- Queries ---------------
    def list(self, user_id: int) -> Sequence[Todo]:
        return self.repo.list_for_user(user_id)

    def get(self, todo_id: int, user_id: int) -> Todo:
        todo = self.repo.get(todo_id)
        if not todo:
            raise NotFoundError(TODO_NOT_FOUND)
        if todo.user_id != user_id:
            logger.info("User %s denied access to todo %s", user_id, todo_id)
            raise ForbiddenError(TODO_NOT_FOUND)
        return todo

    # --------------- Commands ---------------
    def create(self, payload: TodoIn, *, user_id: int, image: Optional[ImageUpload] = None) -> Todo:
        fields = self._clean_fields(payload)

        reference = ""
        if image is not None:
            reference = self.images.save(image)

        try:
            todo = self.repo.create(user_id=user_id, image_reference=reference, **fields)
        except Exception:
            self._discard_image(reference, "todo creation failed")
            raise

        logger.info("User %s created todo %s", user_id, todo.id)
        return todo

    def update(self, todo_id: int, payload: TodoIn, *, user_id: int, image: Optional[ImageUpload] = None) -> Todo:
        todo = self.get(todo_id, user_id)
        fields = self._clean_fields(payload)
        fields["updated_at"] = self.now_fn()

        new_reference = ""
        if image is not None:
            new_reference = self.images.save(image)
            self._discard_image(todo.image_reference, "replaced")
            fields["image_reference"] = new_reference

        try:
            todo = self.repo.update(todo, **fields)
        except Exception:
            self._discard_image(new_reference, "todo update failed")
            raise

        logger.info("User %s updated todo %s", user_id, todo.id)
        return todo

    def delete(self, todo_id: int, *, user_id: int) -> None:
        todo = self.get(todo_id, user_id)
        self._discard_image(todo.image_reference, "todo deleted")
        self.repo.delete(todo)
        logger.info("User %s deleted todo %s", user_id, todo_id)
