"""
Concrete keyed-entity models.

Each module declares the ``EntityConfig`` of one table and a thin
``GenericModel`` subclass carrying the entity's enrichment and extra lookups.

Modules:
- customers: Customer model
- customer_sites: Customer site model
"""

from .customer_sites import CUSTOMER_SITE_ENTITY_CONFIG, CustomerSiteModel
from .customers import CUSTOMER_ENTITY_CONFIG, CustomerModel

__all__ = [
    "CUSTOMER_ENTITY_CONFIG",
    "CUSTOMER_SITE_ENTITY_CONFIG",
    "CustomerModel",
    "CustomerSiteModel",
]
