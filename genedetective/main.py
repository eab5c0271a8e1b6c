import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from genedetective.api.router import router as api_router
from genedetective.core.config import settings
from genedetective.core.database import create_db_and_tables, engine
from genedetective.core.exceptions import register_exception_handlers
from genedetective.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gère le cycle de vie de l'application:
    - Configure le logging.
    - Crée les tables de base de données.
    - Libère le pool de connexions à l'arrêt.
    """
    configure_logging()
    logger.info("=== Application Startup ===")

    await create_db_and_tables()

    logger.info("=== Application Startup Complete ===")
    try:
        yield
    finally:
        logger.info("=== Application Shutdown ===")
        await engine.dispose()
        logger.info("=== Application Shutdown Complete ===")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    register_exception_handlers(app)

    # Middleware CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.ALLOWED_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware Trusted Hosts
    if settings.ENVIRONMENT not in ("development", "test"):
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.TRUSTED_HOSTS)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
