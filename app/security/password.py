import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    # Comptes OAuth : pas de hash stocké, même coût qu'un mot de passe faux
    if not hashed:
        pwd_context.dummy_verify()
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError as e:
        logger.info("verify_password: unreadable stored hash (%s)", e)
        return False


def dummy_verify() -> None:
    """Coût équivalent à une vérification réelle (utilisateur inconnu)."""
    pwd_context.dummy_verify()
