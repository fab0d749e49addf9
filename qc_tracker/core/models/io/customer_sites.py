"""
Customer site I/O models for API requests and responses.

A customer site ties a customer to one of its delivery sites under its own
code. Reads carry the customer's display name, filled in after the base query.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerSiteRead(BaseModel):
    """Schema for reading a customer site from the API."""

    model_config = ConfigDict(from_attributes=True)

    code: str = Field(description="Customer site code (natural key)")
    customers: str = Field(description="Code of the owning customer")
    site: str = Field(description="Site code")
    is_active: bool = Field(description="Whether this customer site is in use")
    customer_name: Optional[str] = Field(default=None, description="Name of the owning customer")
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class CustomerSiteCreate(BaseModel):
    """Schema for creating a customer site via the API."""

    code: str = Field(min_length=1, max_length=10, description="Customer site code (natural key)")
    customers: str = Field(min_length=1, max_length=5, description="Code of the owning customer")
    site: str = Field(min_length=1, max_length=5, description="Site code")
    is_active: bool = Field(default=True, description="Whether this customer site is in use")


class CustomerSiteUpdate(BaseModel):
    """Schema for updating a customer site via the API."""

    customers: Optional[str] = Field(default=None, min_length=1, max_length=5)
    site: Optional[str] = Field(default=None, min_length=1, max_length=5)
    is_active: Optional[bool] = None


class CustomerSiteFilters(BaseModel):
    """Equality filters accepted by ``GET /customer-sites``."""

    customers: Optional[str] = None
    site: Optional[str] = None
    is_active: Optional[bool] = None
