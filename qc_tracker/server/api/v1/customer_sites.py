"""
API endpoints for managing customer sites.

Besides the generic CRUD routes, two lookups list the sites of one customer
and the customers served at one site.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.responses import JSONResponse

from qc_tracker.core.database.repositories import CUSTOMER_SITE_ENTITY_CONFIG, CustomerSiteModel
from qc_tracker.core.keyed import ErrorKind
from qc_tracker.core.logging_config import get_logger
from qc_tracker.core.models.io import (
    CustomerSiteCreate,
    CustomerSiteFilters,
    CustomerSiteRead,
    CustomerSiteUpdate,
)
from qc_tracker.server.api.controller import GenericController
from qc_tracker.server.api.responses import error_response, success_response

logger = get_logger(__name__)

controller: GenericController[CustomerSiteRead] = GenericController(
    CUSTOMER_SITE_ENTITY_CONFIG,
    CustomerSiteModel,
    create_schema=CustomerSiteCreate,
    update_schema=CustomerSiteUpdate,
    filter_schema=CustomerSiteFilters,
    tags=["customer-sites"],
)


async def get_sites_by_customer(
    customer_code: str,
    model: CustomerSiteModel = Depends(controller.get_model),
) -> JSONResponse:
    """
    List every site of one customer, ordered by site code.

    An unknown customer yields an empty list rather than a 404.
    """
    if not customer_code.strip():
        return error_response(ErrorKind.MISSING_KEY, "Customer code is required")
    sites = await model.get_by_customer(customer_code)
    logger.debug(f"Found {len(sites)} site(s) for customer {customer_code}")
    return success_response(data=sites, message=f"Sites for customer {customer_code} retrieved successfully")


async def get_customers_by_site(
    site_code: str,
    model: CustomerSiteModel = Depends(controller.get_model),
) -> JSONResponse:
    """
    List every customer served at one site, ordered by customer code.
    """
    if not site_code.strip():
        return error_response(ErrorKind.MISSING_KEY, "Site code is required")
    sites = await model.get_by_site(site_code)
    logger.debug(f"Found {len(sites)} customer(s) for site {site_code}")
    return success_response(data=sites, message=f"Customers for site {site_code} retrieved successfully")


controller.add_route(
    "/customer/{customer_code}",
    get_sites_by_customer,
    methods=["GET"],
    summary="List Sites of a Customer",
    description="Retrieve all customer sites that belong to the given customer code.",
)
controller.add_route(
    "/site/{site_code}",
    get_customers_by_site,
    methods=["GET"],
    summary="List Customers of a Site",
    description="Retrieve all customer sites registered for the given site code.",
)

router = controller.router
