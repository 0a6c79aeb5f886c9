import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure le logging racine une seule fois (appelé au démarrage de l'app)."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # uvicorn garde ses propres handlers ; on aligne seulement le niveau
    logging.getLogger("uvicorn.error").setLevel(level.upper())
