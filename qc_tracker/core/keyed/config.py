"""
Declarative per-entity configuration for the keyed-entity framework.

An ``EntityConfig`` is pure data: it names the table, the ordered key columns
and which columns may be filtered, sorted and searched. It is built once at
import time for each entity and never changes afterwards, so it is safe to
share between concurrent requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple

from .errors import EntityConfigError

SORT_DIRECTIONS = ("ASC", "DESC")

DEFAULT_LIMIT = 20
MAX_LIMIT = 200


@dataclass(frozen=True)
class SortSpec:
    """Column and direction used when a request does not ask for a valid sort."""

    column: str
    direction: str = "ASC"


@dataclass(frozen=True)
class EntityConfig:
    """Description of one keyed table.

    Attributes:
        entity_name: Human-readable name used in messages and logs
        table_name: Physical table name
        key_columns: Ordered natural key; a single column or a composite
        columns: Every physical column a caller may read or write
        filterable_columns: Columns accepted as equality filters on list queries
        sortable_columns: Columns accepted as ``sortBy`` values
        searchable_columns: Columns matched by the free-text ``search`` parameter
        default_sort: Sort applied when the requested one is missing or not allowed
        default_limit: Page size when the request gives none
        max_limit: Upper bound on the page size
        timestamps: Table carries ``created_at`` / ``updated_at``
        audit_columns: Table carries ``created_by`` / ``updated_by``
        active_column: Boolean column flagging rows in use, if the table has one
    """

    entity_name: str
    table_name: str
    key_columns: Tuple[str, ...]
    columns: FrozenSet[str]
    default_sort: SortSpec
    filterable_columns: FrozenSet[str] = field(default_factory=frozenset)
    sortable_columns: FrozenSet[str] = field(default_factory=frozenset)
    searchable_columns: Tuple[str, ...] = ()
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = MAX_LIMIT
    timestamps: bool = True
    audit_columns: bool = True
    active_column: Optional[str] = "is_active"

    def __post_init__(self) -> None:
        # Normalise iterables handed in as lists or sets.
        object.__setattr__(self, "key_columns", tuple(self.key_columns))
        object.__setattr__(self, "columns", frozenset(self.columns))
        object.__setattr__(self, "filterable_columns", frozenset(self.filterable_columns))
        object.__setattr__(self, "sortable_columns", frozenset(self.sortable_columns))
        object.__setattr__(self, "searchable_columns", tuple(self.searchable_columns))
        self._validate()

    def _validate(self) -> None:
        if not self.key_columns:
            raise EntityConfigError(f"{self.entity_name}: key_columns must not be empty")
        if len(set(self.key_columns)) != len(self.key_columns):
            raise EntityConfigError(f"{self.entity_name}: key_columns contains duplicates")

        self._require_known("key_columns", self.key_columns)
        self._require_known("filterable_columns", self.filterable_columns)
        self._require_known("sortable_columns", self.sortable_columns)
        self._require_known("searchable_columns", self.searchable_columns)

        if self.default_sort.column not in self.sortable_columns:
            raise EntityConfigError(
                f"{self.entity_name}: default sort column '{self.default_sort.column}' is not sortable"
            )
        if self.default_sort.direction.upper() not in SORT_DIRECTIONS:
            raise EntityConfigError(f"{self.entity_name}: invalid sort direction '{self.default_sort.direction}'")
        if not 0 < self.default_limit <= self.max_limit:
            raise EntityConfigError(f"{self.entity_name}: default_limit must be between 1 and max_limit")

        expected = []
        if self.timestamps:
            expected += ["created_at", "updated_at"]
        if self.audit_columns:
            expected += ["created_by", "updated_by"]
        if self.active_column:
            expected.append(self.active_column)
        self._require_known("managed columns", expected)

    def _require_known(self, label: str, names: Iterable[str]) -> None:
        unknown = sorted(set(names) - self.columns)
        if unknown:
            raise EntityConfigError(f"{self.entity_name}: {label} not in columns: {', '.join(unknown)}")

    @property
    def key_path(self) -> str:
        """Route suffix for the key, e.g. ``/{code}`` or ``/{customer}/{site}``."""
        return "".join(f"/{{{column}}}" for column in self.key_columns)
