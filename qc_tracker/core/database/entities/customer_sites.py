"""
Customer-site table definition.

A customer site links a customer to one of its manufacturing sites and is
identified by its own short code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field

from ..base import Base


class CustomerSite(Base, table=True):
    """Persistent customer-site relationship.

    Table: customers_site
    """

    __tablename__ = "customers_site"
    __table_args__ = ({"extend_existing": True},)

    code: str = Field(primary_key=True, max_length=10, description="Customer-site code (natural key)")
    customers: str = Field(foreign_key="customers.code", max_length=5, index=True, description="Customer code")
    site: str = Field(max_length=5, index=True, description="Site code")
    is_active: bool = Field(default=True, description="Whether the relationship is in use")

    created_by: Optional[int] = Field(default=None, description="User who created the row")
    updated_by: Optional[int] = Field(default=None, description="User who last changed the row")
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
