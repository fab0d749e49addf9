"""
SQLModel table definitions.

Importing this package registers every table on the shared metadata used by
``create_all`` and by Alembic.
"""

from .customer_sites import CustomerSite
from .customers import Customer

__all__ = ["Customer", "CustomerSite"]
