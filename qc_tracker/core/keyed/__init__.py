"""
Keyed-entity framework.

Configuration-driven CRUD over tables identified by a natural key of one or
more columns. An ``EntityConfig`` describes the table, the ``KeyCodec``
functions turn key values into SQL, and ``GenericModel`` runs the statements.
"""

from .codec import WhereClause, build_where_clause, extract_key_values
from .config import DEFAULT_LIMIT, MAX_LIMIT, SORT_DIRECTIONS, EntityConfig, SortSpec
from .errors import EntityConfigError, KeyedEntityError, MissingKeyError
from .model import GenericModel, RowMapper, escape_like
from .results import (
    EntityHealth,
    EntityStatistics,
    ErrorKind,
    HealthStatus,
    OperationResult,
    PaginatedResult,
    Pagination,
    QueryOptions,
    RequestContext,
)

__all__ = [
    "DEFAULT_LIMIT",
    "MAX_LIMIT",
    "SORT_DIRECTIONS",
    "EntityConfig",
    "EntityConfigError",
    "EntityHealth",
    "EntityStatistics",
    "ErrorKind",
    "GenericModel",
    "HealthStatus",
    "KeyedEntityError",
    "MissingKeyError",
    "OperationResult",
    "PaginatedResult",
    "Pagination",
    "QueryOptions",
    "RequestContext",
    "RowMapper",
    "SortSpec",
    "WhereClause",
    "build_where_clause",
    "escape_like",
    "extract_key_values",
]
