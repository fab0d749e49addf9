"""
API endpoints for managing customers.

All routes come from the generic keyed-entity controller; customers need no
endpoint beyond plain CRUD.
"""

from __future__ import annotations

from qc_tracker.core.database.repositories import CUSTOMER_ENTITY_CONFIG, CustomerModel
from qc_tracker.core.models.io import CustomerCreate, CustomerFilters, CustomerRead, CustomerUpdate
from qc_tracker.server.api.controller import GenericController

controller: GenericController[CustomerRead] = GenericController(
    CUSTOMER_ENTITY_CONFIG,
    CustomerModel,
    create_schema=CustomerCreate,
    update_schema=CustomerUpdate,
    filter_schema=CustomerFilters,
    tags=["customers"],
)

router = controller.router
