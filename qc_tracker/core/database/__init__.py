"""
Database layer for QC Tracker.

Structure:
- entities/: SQLModel table definitions, one module per table
- repositories/: concrete keyed-entity models built on ``GenericModel``
- store.py: the positional-parameter ``Store`` contract and its SQLAlchemy implementation
- session.py: global engine and store
- utils.py: engine creation and table bootstrap helpers
"""

from .base import Base
from .store import (
    ConstraintKind,
    ConstraintViolationError,
    QueryResult,
    SqlAlchemyStore,
    Store,
)
from .utils import create_all, create_engine

__all__ = [
    "Base",
    "ConstraintKind",
    "ConstraintViolationError",
    "QueryResult",
    "SqlAlchemyStore",
    "Store",
    "create_all",
    "create_engine",
]
