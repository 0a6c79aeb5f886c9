"""Fixtures communes : base SQLite en mémoire, client HTTP, helpers d'inscription."""

import base64
import os

# Doit précéder tout import de `app` : settings et engine sont construits à l'import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["IMAGE_STORAGE"] = "database"
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["GOOGLE_CLIENT_SECRET"] = ""
os.environ["FRONTEND_URL"] = "http://frontend.test"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from app.core.config import jwt_settings
from app.db.session import engine
from app.main import app
from app.security.tokens import TokenService

# PNG 1x1 valide
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
# GIF 1x1 valide
GIF_BYTES = base64.b64decode("R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7")

PASSWORD = "correct horse battery"


@pytest.fixture(autouse=True)
def setup_db():
    """Crée les tables avant chaque test, les supprime après."""
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)
    app.dependency_overrides.clear()


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(jwt_settings)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Inscrit un utilisateur et retourne le corps de la réponse {token, user}."""
    def _signup(email: str = "alice@example.com", username: str = "alice", password: str = PASSWORD) -> dict:
        res = client.post("/signup", json={"username": username, "email": email, "password": password})
        assert res.status_code == 201, res.text
        return res.json()
    return _signup
