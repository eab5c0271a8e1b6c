"""
Configuration pytest pour genedetective-identity.

Les tests tournent sur une base SQLite en mémoire (aiosqlite), recréée pour
chaque test. Les variables d'environnement sont posées avant tout import de
``genedetective`` car les settings sont chargés à l'import.

Usage:
    pytest
    pytest -m "not integration"
"""

import os
from collections.abc import AsyncGenerator

# Variables d'environnement pour les tests
# Respecte les variables déjà définies (ex: dans la CI)
TEST_ENV = {
    "ENVIRONMENT": "test",
    "DEBUG": "false",
    "JWT_SECRET": "test-secret-key-for-genedetective-identity-0123456789abcdef",
    "JWT_ALGORITHM": "HS256",
    "ACCESS_TOKEN_EXPIRE_HOURS": "24",
    # Facteur de travail réduit pour garder des tests rapides
    "BCRYPT_ROUNDS": "4",
    "SQLALCHEMY_DATABASE_URI": "sqlite+aiosqlite:///:memory:",
}

for key, value in TEST_ENV.items():
    if key not in os.environ:
        os.environ[key] = value

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from genedetective.core.data_access import DataAccess  # noqa: E402
from genedetective.core.database import (  # noqa: E402
    create_db_and_tables,
    enable_sqlite_foreign_keys,
    get_session,
)

# ============================================================================
# Fixtures base de données
# ============================================================================


@pytest.fixture
async def test_engine():
    """
    Crée le moteur SQLAlchemy de test.

    StaticPool partage l'unique connexion en mémoire entre les sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    await create_db_and_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Fournit une session de base de données pour chaque test."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def dal(db_session) -> DataAccess:
    return DataAccess(db_session)


# ============================================================================
# Fixtures application
# ============================================================================


@pytest.fixture
def app(session_maker):
    """Application complète branchée sur la base de test (sans lifespan)."""
    from genedetective.main import create_app
    from genedetective.services.analysis_engine import MockGeneAnalyzer, get_analyzer

    test_app = create_app()

    async def override_get_session():
        async with session_maker() as session:
            yield session

    test_app.dependency_overrides[get_session] = override_get_session
    test_app.dependency_overrides[get_analyzer] = lambda: MockGeneAnalyzer(seed=42)
    return test_app


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client HTTP asynchrone sur l'application de test."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def test_env():
    """Fournit les variables d'environnement de test effectivement appliquées."""
    return {key: os.environ[key] for key in TEST_ENV}


# ============================================================================
# Helpers API
# ============================================================================


@pytest.fixture
def register(client):
    """Inscrit un utilisateur via l'API et retourne le corps de la réponse."""

    async def _register(
        email: str, role: int = 1, password: str = "Secret1!", full_name: str = "Test User"
    ) -> dict:
        response = await client.post(
            "/api/auth/register",
            json={
                "fullName": full_name,
                "email": email,
                "password": password,
                "userRole": role,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def bearer():
    """Construit le header Authorization pour un token."""

    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _bearer
