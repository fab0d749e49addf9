"""
Customer table definition.

Customers are the top of the reference-data hierarchy: every customer site,
part and defect record points at a customer code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field

from ..base import Base


class Customer(Base, table=True):
    """Persistent customer record.

    Table: customers
    """

    __tablename__ = "customers"
    __table_args__ = ({"extend_existing": True},)

    code: str = Field(primary_key=True, max_length=5, description="Customer code (natural key)")
    name: str = Field(max_length=100, unique=True, description="Customer display name")
    is_active: bool = Field(default=True, description="Whether the customer is in use")

    created_by: Optional[int] = Field(default=None, description="User who created the row")
    updated_by: Optional[int] = Field(default=None, description="User who last changed the row")
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
