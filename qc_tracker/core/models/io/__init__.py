"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- customers: Customer I/O models
- customer_sites: Customer site I/O models
"""

from .customer_sites import (
    CustomerSiteCreate,
    CustomerSiteFilters,
    CustomerSiteRead,
    CustomerSiteUpdate,
)
from .customers import (
    CustomerCreate,
    CustomerFilters,
    CustomerRead,
    CustomerUpdate,
)

__all__ = [
    "CustomerCreate",
    "CustomerFilters",
    "CustomerRead",
    "CustomerSiteCreate",
    "CustomerSiteFilters",
    "CustomerSiteRead",
    "CustomerSiteUpdate",
    "CustomerUpdate",
]
