"""Configuration du logging applicatif."""

import logging

from genedetective.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure le logger racine avec le format et le niveau des settings."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=settings.LOG_FORMAT,
        force=True,
    )
    # SQLAlchemy logue chaque requête en INFO quand echo=True
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.SQLALCHEMY_ECHO else logging.WARNING
    )
