"""
Customer model.

Customers are keyed by their short code and need nothing beyond the generic
CRUD behaviour.
"""

from __future__ import annotations

from qc_tracker.core.keyed import EntityConfig, GenericModel, SortSpec
from qc_tracker.core.models.io import CustomerRead
from qc_tracker.server.core.config import settings

from ..store import Store

CUSTOMER_ENTITY_CONFIG = EntityConfig(
    entity_name="Customer",
    table_name="customers",
    key_columns=("code",),
    columns=frozenset(
        {"code", "name", "is_active", "created_by", "updated_by", "created_at", "updated_at"}
    ),
    default_sort=SortSpec("code", "ASC"),
    filterable_columns=frozenset({"is_active"}),
    sortable_columns=frozenset({"code", "name", "is_active", "created_at", "updated_at"}),
    searchable_columns=("code", "name"),
    default_limit=settings.pagination.default_limit,
    max_limit=settings.pagination.max_limit,
)


class CustomerModel(GenericModel[CustomerRead]):
    """Data access for the ``customers`` table."""

    def __init__(self, store: Store) -> None:
        super().__init__(store, CUSTOMER_ENTITY_CONFIG, CustomerRead.model_validate)
