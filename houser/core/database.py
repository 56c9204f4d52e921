"""Connection pool and session management.

The engine and session factory are built by the application factory and kept
on ``app.state``; nothing here holds a module-level connection.
"""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from houser.core.config import Settings
from houser.models import Base


def create_db_engine(settings: Settings) -> Engine:
    """Build a pooled engine sized from settings."""
    if settings.DATABASE_URL.startswith("sqlite://"):
        # One shared connection so in-memory databases survive across sessions.
        return create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.DEBUG,
        )
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        pool_size=settings.DB_MAX_CONNECTIONS,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_MAX_LIFETIME_SECONDS or -1,
        echo=settings.DEBUG,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create all tables. Use Alembic for migrations in production."""
    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's pool and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
