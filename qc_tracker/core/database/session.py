"""
Global database engine and store management.

This module manages the global AsyncEngine and the ``Store`` built on top of it
that the keyed-entity models use for every statement.
"""

from __future__ import annotations

from qc_tracker.core.logging_config import get_logger
from qc_tracker.server.core.config import settings

from .store import SqlAlchemyStore, Store
from .utils import create_all, create_engine

logger = get_logger(__name__)

# Create global engine and store
engine = create_engine(settings.effective_database_url, echo=settings.database_echo)
store = SqlAlchemyStore(engine)


def get_store() -> Store:
    """
    Dependency returning the process-wide store.

    Returns:
        Store: The store bound to the global engine.
    """
    return store


async def init_db() -> None:
    """
    Initialize the database.

    Creates any table defined in the SQLModel metadata that does not exist yet.
    Schema changes in production are applied with Alembic migrations.
    """
    await create_all(engine)
    logger.info("Database tables verified")


async def close_db() -> None:
    """Dispose of the global engine's connection pool."""
    await engine.dispose()
