"""
Configuration et initialisation de la base de données pour genedetective-identity.

Base de données: SQLite (aiosqlite) ou PostgreSQL (asyncpg) avec SQLAlchemy 2.0 et AsyncSession
"""

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from genedetective.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class pour tous les modèles SQLAlchemy."""

    pass


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Active les clés étrangères sur chaque connexion SQLite.

    SQLite ignore les ON DELETE CASCADE tant que PRAGMA foreign_keys n'est pas
    activé, et ce réglage est propre à chaque connexion.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _ensure_sqlite_directory(url: str) -> None:
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


if settings.is_sqlite:
    _ensure_sqlite_directory(settings.SQLALCHEMY_DATABASE_URI)

# Engine SQLAlchemy 2.0
engine = create_async_engine(settings.SQLALCHEMY_DATABASE_URI, echo=settings.SQLALCHEMY_ECHO)
enable_sqlite_foreign_keys(engine)

# Session factory
async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Obtient une session de base de données."""
    async with async_session_maker() as session:
        yield session


async def create_db_and_tables(bind: AsyncEngine | None = None) -> None:
    """Crée toutes les tables."""
    # Importer les modèles pour enregistrer les tables dans Base.metadata
    import genedetective.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables de base de données créées")
