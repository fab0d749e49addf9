"""
Customer I/O models for API requests and responses.

These schemas define the contract between the ``/customers`` endpoints and
their clients for creating, reading, updating and filtering customers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerRead(BaseModel):
    """Schema for reading a customer from the API."""

    model_config = ConfigDict(from_attributes=True)

    code: str = Field(description="Customer code (natural key)")
    name: str = Field(description="Customer name")
    is_active: bool = Field(description="Whether this customer is in use")
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class CustomerCreate(BaseModel):
    """Schema for creating a customer via the API."""

    code: str = Field(min_length=1, max_length=5, description="Customer code (natural key)")
    name: str = Field(min_length=1, max_length=100, description="Customer name")
    is_active: bool = Field(default=True, description="Whether this customer is in use")


class CustomerUpdate(BaseModel):
    """Schema for updating a customer via the API."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class CustomerFilters(BaseModel):
    """Equality filters accepted by ``GET /customers``."""

    is_active: Optional[bool] = None
