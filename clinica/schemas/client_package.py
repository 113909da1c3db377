"""
Pydantic schemas for client packages.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from clinica.core.catalog import PackageTier
from clinica.models.client_package import PackageStatus, PaymentStatus


class PackageCreate(BaseModel):
    """A new package always starts in progress and supersedes the previous one"""
    client_id: int = Field(..., ge=1)
    package_type: PackageTier
    total_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    start_date: datetime


class PackageUpdate(BaseModel):
    package_type: PackageTier
    total_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: PackageStatus


class PackageOut(BaseModel):
    id: int
    client_id: int
    package_type: PackageTier
    total_price: Decimal
    start_date: datetime
    status: PackageStatus
    payment_status: PaymentStatus
    created_at: datetime

    class Config:
        from_attributes = True


class PackageSummary(BaseModel):
    """Package row in the client's package history"""
    id: int
    type: PackageTier
    cost: Decimal
    paid: Decimal
    debt: Decimal
    sessions_completed: int
    sessions_total: int
    start_date: datetime
    status: PackageStatus
    payment_status: PaymentStatus
    badge: str


class ActivePackageOverview(BaseModel):
    """Package card on the client detail page"""
    id: int
    type: PackageTier
    display_name: str
    sessions_remaining: int
    sessions_total: int
    current_debt: Decimal
    badge: str
    next_session_date: Optional[datetime] = None
