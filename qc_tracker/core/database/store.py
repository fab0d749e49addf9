"""
Relational store abstraction used by the keyed-entity framework.

The framework writes SQL with 1-based positional placeholders (``$1``, ``$2``,
...) and only needs two things from the database driver: parameter binding and
the ability to tell unique-key violations apart from foreign-key violations.
``Store`` captures that contract; ``SqlAlchemyStore`` implements it on top of an
async SQLAlchemy engine so the same queries run on PostgreSQL (asyncpg) and on
SQLite (aiosqlite, used by the test suite).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Protocol, Sequence, Tuple, runtime_checkable

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine

from qc_tracker.core.logging_config import get_logger

logger = get_logger(__name__)

_PLACEHOLDER = re.compile(r"\$(\d+)")

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


@dataclass(frozen=True)
class QueryResult:
    """Rows returned by a statement plus the number of rows it touched."""

    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


class ConstraintKind(str, Enum):
    """Integrity constraint families the framework reacts to."""

    unique = "unique"
    foreign_key = "foreign_key"
    other = "other"


class ConstraintViolationError(Exception):
    """Raised by a store when a statement violates an integrity constraint."""

    def __init__(self, kind: ConstraintKind, detail: str = "") -> None:
        super().__init__(f"{kind.value} constraint violated: {detail}" if detail else f"{kind.value} constraint violated")
        self.kind = kind
        self.detail = detail


@runtime_checkable
class Store(Protocol):
    """Parameterized query execution against the relational store."""

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Run one statement with positional ``$n`` parameters."""
        ...


def to_named_params(sql: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Rewrite ``$n`` placeholders into SQLAlchemy ``:pn`` bind parameters.

    Args:
        sql: Statement using 1-based positional placeholders
        params: Values in placeholder order

    Returns:
        The rewritten statement and its bind parameter mapping

    Raises:
        ValueError: If a placeholder has no matching parameter
    """

    def _substitute(match: re.Match) -> str:
        index = int(match.group(1))
        if index < 1 or index > len(params):
            raise ValueError(f"Placeholder ${index} has no bound value ({len(params)} given)")
        return f":p{index}"

    statement = _PLACEHOLDER.sub(_substitute, sql)
    return statement, {f"p{index}": value for index, value in enumerate(params, start=1)}


def classify_integrity_error(exc: IntegrityError) -> ConstraintKind:
    """Work out which constraint family an ``IntegrityError`` belongs to.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports it in the message.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return ConstraintKind.unique
    if code == FOREIGN_KEY_VIOLATION:
        return ConstraintKind.foreign_key

    message = str(orig).lower()
    if "unique constraint" in message or "duplicate key" in message:
        return ConstraintKind.unique
    if "foreign key constraint" in message:
        return ConstraintKind.foreign_key
    return ConstraintKind.other


class SqlAlchemyStore:
    """``Store`` implementation backed by an ``AsyncEngine``.

    Each call runs in its own transaction, committed when the statement succeeds.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        statement, bind = to_named_params(sql, params)
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(statement), bind)
                if result.returns_rows:
                    rows = [dict(row) for row in result.mappings().all()]
                    return QueryResult(rows=rows, row_count=len(rows))
                return QueryResult(rows=[], row_count=max(result.rowcount, 0))
        except IntegrityError as exc:
            kind = classify_integrity_error(exc)
            logger.debug(f"Integrity violation ({kind.value}) while executing: {statement}")
            raise ConstraintViolationError(kind, str(exc.orig)) from exc
