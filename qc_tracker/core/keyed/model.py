"""
Generic data-access object for keyed entities.

``GenericModel`` owns every SQL statement needed for plain CRUD on one table.
It is parameterized by an ``EntityConfig`` and a row mapper instead of being
subclassed per table; concrete entities subclass it only to add enrichment
(``enrich``) or extra lookups.

Contract:
- expected outcomes (not found, duplicate key, broken reference) are returned
  as ``OperationResult`` values or ``None``;
- only infrastructure failures (connection loss, driver errors) raise.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from qc_tracker.core.database.store import ConstraintKind, ConstraintViolationError, Store
from qc_tracker.core.logging_config import get_logger

from .codec import build_where_clause
from .config import SORT_DIRECTIONS, EntityConfig
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

logger = get_logger(__name__)

E = TypeVar("E")

RowMapper = Callable[[Dict[str, Any]], E]

MANAGED_COLUMNS = frozenset({"created_at", "updated_at", "created_by", "updated_by"})

# Largest OFFSET a signed 64-bit SQL integer can carry.
MAX_OFFSET = 2**63 - 1


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def escape_like(term: str) -> str:
    """Escape ``LIKE`` wildcards so user input only matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class GenericModel(Generic[E]):
    """CRUD, listing and existence checks for one keyed table."""

    def __init__(self, store: Store, config: EntityConfig, row_mapper: RowMapper[E]) -> None:
        """Bind the model to its store, configuration and row mapper.

        Args:
            store: Store used for every statement
            config: Entity description (table, key, allowed columns)
            row_mapper: Turns one result row into a domain entity
        """
        self.store = store
        self.config = config
        self.row_mapper = row_mapper

    # ==================== READS ====================

    async def get_by_key(self, key_values: Mapping[str, Any]) -> Optional[E]:
        """Fetch one entity by its key.

        Returns:
            The entity, or ``None`` when no row matches
        """
        where = build_where_clause(self.config, key_values)
        result = await self.store.execute(
            f"SELECT * FROM {self.config.table_name} WHERE {where.clause} LIMIT 1",
            where.params,
        )
        if not result.rows:
            return None
        entities = await self.enrich([self.row_mapper(result.rows[0])])
        return entities[0]

    async def find_all(self, options: Optional[QueryOptions] = None) -> PaginatedResult[E]:
        """List entities one page at a time.

        Page and limit are clamped, the sort column must be sortable and the
        filters must be filterable; anything else falls back to the configured
        defaults so request input never reaches the SQL text. A page beyond
        ``MAX_OFFSET`` yields an empty page without querying rows.
        """
        options = options or QueryOptions()
        page = _positive_int(options.page, 1)
        limit = min(_positive_int(options.limit, self.config.default_limit), self.config.max_limit)
        order_by = self._order_by(options.sort_by, options.sort_order)
        where_sql, params = self._filter_predicate(
            options.filters, options.search, allowed=self.config.filterable_columns
        )

        count_result = await self.store.execute(
            f"SELECT COUNT(*) AS total FROM {self.config.table_name}{where_sql}", params
        )
        total = int(count_result.rows[0]["total"]) if count_result.rows else 0

        offset = (page - 1) * limit
        if offset > MAX_OFFSET:
            entities: List[E] = []
        else:
            next_param = len(params) + 1
            data_result = await self.store.execute(
                f"SELECT * FROM {self.config.table_name}{where_sql} "
                f"ORDER BY {order_by} LIMIT ${next_param} OFFSET ${next_param + 1}",
                [*params, limit, offset],
            )
            entities = await self.enrich([self.row_mapper(row) for row in data_result.rows])
        return PaginatedResult(data=entities, pagination=Pagination.build(page=page, limit=limit, total=total))

    async def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count rows matching equality filters on known columns."""
        where_sql, params = self._filter_predicate(filters or {}, None, allowed=self.config.columns)
        result = await self.store.execute(f"SELECT COUNT(*) AS total FROM {self.config.table_name}{where_sql}", params)
        return int(result.rows[0]["total"]) if result.rows else 0

    async def exists(self, key_values: Mapping[str, Any]) -> bool:
        """Cheap existence probe that does not materialize the row."""
        where = build_where_clause(self.config, key_values)
        result = await self.store.execute(
            f"SELECT 1 AS found FROM {self.config.table_name} WHERE {where.clause} LIMIT 1",
            where.params,
        )
        return bool(result.rows)

    async def enrich(self, entities: List[E]) -> List[E]:
        """Hook run on every entity returned by ``get_by_key``, ``find_all`` and writes.

        Concrete entities override it to attach display-only fields (for
        example a customer name) with follow-up queries, keeping the generic
        statements join-free.
        """
        return entities

    # ==================== WRITES ====================

    async def create(
        self, data: Mapping[str, Any], context: Optional[RequestContext] = None
    ) -> OperationResult[E]:
        """Insert one row built from the supplied fields."""
        context = context or RequestContext()
        values = self._writable(data)
        unknown = self._unknown_columns(values)
        if unknown:
            return OperationResult.fail(ErrorKind.VALIDATION_ERROR, f"Unknown field(s): {', '.join(unknown)}")
        if not values:
            return OperationResult.fail(ErrorKind.VALIDATION_ERROR, "No fields to insert")

        key_values = {column: values.get(column) for column in self.config.key_columns}
        if all(value not in (None, "") for value in key_values.values()) and await self.exists(key_values):
            return OperationResult.fail(
                ErrorKind.DUPLICATE_KEY, f"{self.config.entity_name} {self._describe_key(key_values)} already exists"
            )

        now = _utc_now()
        if self.config.timestamps:
            values["created_at"] = now
            values["updated_at"] = now
        if self.config.audit_columns and context.user_id is not None:
            values["created_by"] = context.user_id
            values["updated_by"] = context.user_id

        columns = list(values)
        placeholders = ", ".join(f"${index}" for index in range(1, len(columns) + 1))
        sql = f"INSERT INTO {self.config.table_name} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *"
        try:
            result = await self.store.execute(sql, [values[column] for column in columns])
        except ConstraintViolationError as exc:
            return self._constraint_failure(exc, reference_error=ErrorKind.INVALID_REFERENCE)

        logger.info(f"Created {self.config.entity_name} {self._describe_key(key_values)}")
        entities = await self.enrich([self.row_mapper(row) for row in result.rows])
        return OperationResult.ok(entities[0] if entities else None)

    async def update(
        self,
        key_values: Mapping[str, Any],
        data: Mapping[str, Any],
        context: Optional[RequestContext] = None,
    ) -> OperationResult[E]:
        """Partially update one row; omitted fields keep their stored values."""
        context = context or RequestContext()
        values = self._writable(data)
        unknown = self._unknown_columns(values)
        if unknown:
            return OperationResult.fail(ErrorKind.VALIDATION_ERROR, f"Unknown field(s): {', '.join(unknown)}")
        key_fields = [column for column in self.config.key_columns if column in values]
        if key_fields:
            return OperationResult.fail(
                ErrorKind.VALIDATION_ERROR, f"Key field(s) cannot be updated: {', '.join(key_fields)}"
            )
        if not values:
            return OperationResult.fail(ErrorKind.VALIDATION_ERROR, "No fields to update")

        if self.config.timestamps:
            values["updated_at"] = _utc_now()
        if self.config.audit_columns and context.user_id is not None:
            values["updated_by"] = context.user_id

        columns = list(values)
        assignments = ", ".join(f"{column} = ${index}" for index, column in enumerate(columns, start=1))
        where = build_where_clause(self.config, key_values, start=len(columns) + 1)
        sql = f"UPDATE {self.config.table_name} SET {assignments} WHERE {where.clause} RETURNING *"
        try:
            result = await self.store.execute(sql, [*(values[column] for column in columns), *where.params])
        except ConstraintViolationError as exc:
            return self._constraint_failure(exc, reference_error=ErrorKind.INVALID_REFERENCE)

        if not result.rows:
            return self._not_found(key_values)
        logger.info(f"Updated {self.config.entity_name} {self._describe_key(key_values)}: {', '.join(data)}")
        entities = await self.enrich([self.row_mapper(result.rows[0])])
        return OperationResult.ok(entities[0])

    async def delete(self, key_values: Mapping[str, Any]) -> OperationResult[None]:
        """Delete one row by key."""
        where = build_where_clause(self.config, key_values)
        try:
            result = await self.store.execute(f"DELETE FROM {self.config.table_name} WHERE {where.clause}", where.params)
        except ConstraintViolationError as exc:
            return self._constraint_failure(exc, reference_error=ErrorKind.REFERENCED)

        if result.row_count == 0:
            return self._not_found(key_values)
        logger.info(f"Deleted {self.config.entity_name} {self._describe_key(key_values)}")
        return OperationResult.ok()

    # ==================== MONITORING ====================

    async def statistics(self) -> EntityStatistics:
        """Total, active and inactive row counts."""
        table = self.config.table_name
        active_column = self.config.active_column
        if active_column:
            sql = f"SELECT COUNT(*) AS total, SUM(CASE WHEN {active_column} THEN 1 ELSE 0 END) AS active FROM {table}"
        else:
            sql = f"SELECT COUNT(*) AS total FROM {table}"
        result = await self.store.execute(sql)
        row = result.rows[0] if result.rows else {}
        total = int(row.get("total") or 0)
        active = int(row.get("active") or 0) if active_column else total
        return EntityStatistics(
            entity_name=self.config.entity_name,
            table_name=table,
            total=total,
            active=active,
            inactive=total - active,
        )

    async def health(self) -> EntityHealth:
        """Probe the table and report whether it is usable.

        ``critical`` when the table cannot be read or holds no rows,
        ``warning`` when no row is active, ``healthy`` otherwise.
        """
        started = time.perf_counter()
        checks = {"table_reachable": False, "has_data": False, "has_active_records": False}
        issues: List[str] = []
        stats = EntityStatistics(entity_name=self.config.entity_name, table_name=self.config.table_name)

        try:
            stats = await self.statistics()
            checks["table_reachable"] = True
        except (SQLAlchemyError, OSError) as exc:
            logger.warning(f"Health check could not read {self.config.table_name}: {exc}", exc_info=True)
            issues.append(f"Table '{self.config.table_name}' is not reachable: {exc}")

        if checks["table_reachable"]:
            checks["has_data"] = stats.total > 0
            checks["has_active_records"] = stats.active > 0
            if not checks["has_data"]:
                issues.append("Table has no data")
            elif not checks["has_active_records"]:
                issues.append("No active records found")

        if not checks["table_reachable"] or not checks["has_data"]:
            status = HealthStatus.critical
        elif issues:
            status = HealthStatus.warning
        else:
            status = HealthStatus.healthy

        return EntityHealth(
            entity_name=self.config.entity_name,
            table_name=self.config.table_name,
            status=status,
            checks=checks,
            statistics=stats,
            issues=issues,
            response_time_ms=(time.perf_counter() - started) * 1000,
        )

    # ==================== HELPERS ====================

    def _order_by(self, sort_by: Optional[str], sort_order: Optional[str]) -> str:
        default = self.config.default_sort
        column = sort_by if sort_by in self.config.sortable_columns else default.column
        direction = (sort_order or "").upper()
        if direction not in SORT_DIRECTIONS:
            direction = default.direction.upper()
        # Key columns break ties so pages do not overlap.
        tie_breakers = [key for key in self.config.key_columns if key != column]
        return ", ".join([f"{column} {direction}", *tie_breakers])

    def _filter_predicate(
        self,
        filters: Mapping[str, Any],
        search: Optional[str],
        allowed: Sequence[str],
    ) -> Tuple[str, List[Any]]:
        conditions: List[str] = []
        params: List[Any] = []
        for column, value in filters.items():
            if column not in allowed or value is None:
                continue
            params.append(value)
            conditions.append(f"{column} = ${len(params)}")

        term = (search or "").strip()
        if term and self.config.searchable_columns:
            params.append(f"%{escape_like(term)}%")
            placeholder = f"${len(params)}"
            matches = [
                f"LOWER({column}) LIKE LOWER({placeholder}) ESCAPE '\\'" for column in self.config.searchable_columns
            ]
            conditions.append(f"({' OR '.join(matches)})")

        if not conditions:
            return "", params
        return " WHERE " + " AND ".join(conditions), params

    def _writable(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return {column: value for column, value in data.items() if column not in MANAGED_COLUMNS}

    def _unknown_columns(self, values: Mapping[str, Any]) -> List[str]:
        return sorted(column for column in values if column not in self.config.columns)

    def _describe_key(self, key_values: Mapping[str, Any]) -> str:
        return "/".join(str(key_values.get(column)) for column in self.config.key_columns)

    def _not_found(self, key_values: Mapping[str, Any]) -> OperationResult:
        return OperationResult.fail(
            ErrorKind.NOT_FOUND, f"{self.config.entity_name} {self._describe_key(key_values)} not found"
        )

    def _constraint_failure(self, exc: ConstraintViolationError, reference_error: ErrorKind) -> OperationResult:
        logger.info(f"{self.config.entity_name} write rejected by the database: {exc}")
        if exc.kind == ConstraintKind.unique:
            return OperationResult.fail(ErrorKind.DUPLICATE_KEY, f"{self.config.entity_name} already exists")
        if exc.kind == ConstraintKind.foreign_key:
            if reference_error == ErrorKind.REFERENCED:
                return OperationResult.fail(
                    ErrorKind.REFERENCED, f"{self.config.entity_name} is referenced by other records"
                )
            return OperationResult.fail(ErrorKind.INVALID_REFERENCE, "Invalid reference to a related record")
        return OperationResult.fail(ErrorKind.VALIDATION_ERROR, f"{self.config.entity_name} violates a constraint")
