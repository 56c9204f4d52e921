"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session, sessionmaker

from houser import __version__
from houser.api.v1 import router as v1_router
from houser.core.config import Settings, get_settings
from houser.core.database import create_db_engine, create_session_factory
from houser.core.errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker[Session] | None = None,
) -> FastAPI:
    """
    Build the application and the store it owns.

    Pass ``session_factory`` to run against an existing store (tests); otherwise
    a pooled engine is created from settings and disposed on shutdown.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    engine = None
    if session_factory is None:
        engine = create_db_engine(settings)
        session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Houser API started", extra={"environment": settings.APP_ENV})
        yield
        if engine is not None:
            engine.dispose()
        logger.info("Houser API shutting down")

    app = FastAPI(
        title="Houser API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        """Root route; plain liveness text."""
        return "App running"

    return app


app = create_app()
