import logging
from typing import Any, Generic, Optional, Type, TypeVar
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, Session, select, func

from app.core.errors import ConflictError, InternalError

# Type générique pour le modèle (User, Todo, Image)
ModelT = TypeVar("ModelT", bound=SQLModel)

logger = logging.getLogger(__name__)

class BaseRepository(Generic[ModelT]):
    """
    Repository de base pour les opérations CRUD standards.

    👉 Ne contient aucune logique métier.
    👉 Gère la persistance générique : create, read, update, delete, count.
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`.
    👉 Toute erreur SQL annule la transaction (rollback) puis est traduite :
       IntegrityError → ConflictError, le reste → InternalError.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    # ---------- READ ----------

    def count(self) -> int:
        """Retourne le nombre total d’enregistrements."""
        return self.session.exec(select(func.count(self.model.id))).one()

    def get(self, id_: Any) -> Optional[ModelT]:
        """Retourne un enregistrement par son identifiant, ou None."""
        return self.session.get(self.model, id_)

    # ---------- CREATE ----------

    def create(self, **fields) -> ModelT:
        """Crée et persiste un nouvel enregistrement."""
        entity = self.model(**fields)
        self.session.add(entity)
        self._commit(f"create {self.model.__name__}")
        self.session.refresh(entity)
        return entity

    # ---------- UPDATE ----------

    def update(self, entity: ModelT, **changes) -> ModelT:
        """Met à jour un enregistrement existant."""
        for key, value in changes.items():
            setattr(entity, key, value)
        self.session.add(entity)
        self._commit(f"update {self.model.__name__} id={entity.id}")
        self.session.refresh(entity)
        return entity

    # ---------- DELETE ----------

    def delete(self, entity: ModelT) -> None:
        """Supprime un enregistrement."""
        # entity.id doit être lu avant session.delete (l'objet peut être expiré)
        what = f"delete {self.model.__name__} id={entity.id}"
        self.session.delete(entity)
        self._commit(what)

    # ---------- Transaction ----------

    def _commit(self, what: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Integrity error on %s: %s", what, e.orig)
            raise ConflictError(f"Conflict on {self.model.__name__}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Database error on %s: %s", what, e)
            raise InternalError(f"Failed to {what}") from e
