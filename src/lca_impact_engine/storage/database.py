"""Engine and session helpers."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.logging import get_logger

from .models import Base

LOGGER = get_logger(__name__)


def create_db_engine(url: str | None = None, *, settings: Settings | None = None) -> Engine:
    """Create an engine for ``url`` (defaults to ``settings.database_url``).

    In-memory SQLite URLs share a single connection so every session sees the
    same database.
    """
    if url is None:
        url = (settings or get_settings()).database_url
    if url.startswith("sqlite"):
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        _ensure_sqlite_parent(url)
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def _ensure_sqlite_parent(url: str) -> None:
    path = url.split("///", 1)[-1]
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
    LOGGER.info("storage.initialized", url=engine.url.render_as_string(hide_password=True))
