"""
➡️ But : fabriquer le moteur SQL et distribuer une session par requête.

engine : construit depuis settings.DATABASE_URL (fichier SQLite par défaut).
Une base SQLite en mémoire (`sqlite://`) partage une connexion unique : c'est ce qu'utilisent les tests.

init_db() : crée les tables user, todo et image au démarrage.

get_session() : dépendance FastAPI, la session est fermée en fin de requête.
"""

from typing import Dict, Any
from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

# Import all models for creating all tables
from app.db.models.users import User  # noqa: F401
from app.db.models.todos import Todo  # noqa: F401
from app.db.models.images import Image  # noqa: F401

from app.core.config import settings

def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")

def _build_engine() -> Engine:
    url = settings.DATABASE_URL
    assert url, "DATABASE_URL must be set"

    is_sqlite = url.startswith("sqlite:")

    kwargs: Dict[str, Any] = {}
    connect_args: Dict[str, Any] = {}
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False
    if _is_memory_sqlite(url):
        # Une seule connexion partagée, sinon chaque connexion voit une base vide
        kwargs["poolclass"] = StaticPool

    # echo seulement en dev pour ne pas polluer les logs en prod
    engine = create_engine(
        url,
        echo=(settings.ENV == "dev"),
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
        **kwargs,
    )
    return engine

engine: Engine = _build_engine()

def init_db() -> None:
    """
    Crée les tables si elles n'existent pas (usage dev/demo).
    En prod avec Alembic, préfère des migrations.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Dépendance FastAPI : fournit une session par requête.
    Utilisation :
        def route(..., session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
