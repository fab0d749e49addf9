"""
Customer site model.

Adds the owning customer's display name to every returned row and the two
lookups the UI uses to pick a site: all sites of a customer and all customers
served at a site.
"""

from __future__ import annotations

from typing import List

from qc_tracker.core.keyed import EntityConfig, GenericModel, SortSpec
from qc_tracker.core.models.io import CustomerSiteRead
from qc_tracker.server.core.config import settings

from ..store import Store

CUSTOMER_SITE_ENTITY_CONFIG = EntityConfig(
    entity_name="Customer site",
    table_name="customers_site",
    key_columns=("code",),
    columns=frozenset(
        {"code", "customers", "site", "is_active", "created_by", "updated_by", "created_at", "updated_at"}
    ),
    default_sort=SortSpec("code", "ASC"),
    filterable_columns=frozenset({"customers", "site", "is_active"}),
    sortable_columns=frozenset({"code", "customers", "site", "is_active", "created_at", "updated_at"}),
    searchable_columns=("code", "customers", "site"),
    default_limit=settings.pagination.default_limit,
    max_limit=settings.pagination.max_limit,
)


class CustomerSiteModel(GenericModel[CustomerSiteRead]):
    """Data access for the ``customers_site`` table."""

    def __init__(self, store: Store) -> None:
        super().__init__(store, CUSTOMER_SITE_ENTITY_CONFIG, CustomerSiteRead.model_validate)

    async def enrich(self, entities: List[CustomerSiteRead]) -> List[CustomerSiteRead]:
        """Fill ``customer_name`` from the ``customers`` table."""
        codes = sorted({entity.customers for entity in entities})
        if not codes:
            return entities

        placeholders = ", ".join(f"${index}" for index in range(1, len(codes) + 1))
        result = await self.store.execute(f"SELECT code, name FROM customers WHERE code IN ({placeholders})", codes)
        names = {row["code"]: row["name"] for row in result.rows}
        return [entity.model_copy(update={"customer_name": names.get(entity.customers)}) for entity in entities]

    async def get_by_customer(self, customer_code: str) -> List[CustomerSiteRead]:
        """All sites of one customer, ordered by site."""
        result = await self.store.execute(
            "SELECT * FROM customers_site WHERE customers = $1 ORDER BY site ASC, code ASC", [customer_code]
        )
        return await self.enrich([self.row_mapper(row) for row in result.rows])

    async def get_by_site(self, site_code: str) -> List[CustomerSiteRead]:
        """All customers served at one site, ordered by customer."""
        result = await self.store.execute(
            "SELECT * FROM customers_site WHERE site = $1 ORDER BY customers ASC, code ASC", [site_code]
        )
        return await self.enrich([self.row_mapper(row) for row in result.rows])
