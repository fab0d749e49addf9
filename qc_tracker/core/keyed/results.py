"""
Value types exchanged between the keyed-entity models and their callers.

All of these are request-scoped: they are created for one call and never
shared between requests.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Stable, machine-readable error codes surfaced in the response envelope."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_KEY = "MISSING_KEY"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    REFERENCED = "REFERENCED"
    INFRASTRUCTURE_ERROR = "INFRASTRUCTURE_ERROR"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a write: either ``data`` or an ``error`` kind with a message."""

    success: bool
    data: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = None) -> "OperationResult[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "OperationResult[T]":
        return cls(success=False, error=error, message=message)


@dataclass(frozen=True)
class RequestContext:
    """Per-request information the HTTP layer hands to the models explicitly.

    ``user_id`` is the authenticated user's identifier, or ``None`` when the
    request is anonymous. It is only used to stamp ``created_by`` / ``updated_by``.
    """

    user_id: Optional[int] = None


@dataclass
class QueryOptions:
    """List query parameters as received; ``GenericModel.find_all`` sanitises them."""

    page: Any = 1
    limit: Any = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    search: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)


class Pagination(BaseModel):
    """Pagination metadata; serialised with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass
class PaginatedResult(Generic[T]):
    """One page of entities together with its pagination metadata."""

    data: List[T]
    pagination: Pagination


class EntityStatistics(BaseModel):
    """Row counts for one entity table."""

    entity_name: str
    table_name: str
    total: int = 0
    active: int = 0
    inactive: int = 0


class HealthStatus(str, Enum):
    healthy = "healthy"
    warning = "warning"
    critical = "critical"


class EntityHealth(BaseModel):
    """Result of probing an entity table for reachability and usable data."""

    entity_name: str
    table_name: str
    status: HealthStatus
    checks: Dict[str, bool]
    statistics: EntityStatistics
    issues: List[str] = Field(default_factory=list)
    response_time_ms: float = 0.0
