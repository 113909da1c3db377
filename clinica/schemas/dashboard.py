"""
Pydantic schemas for dashboard projections.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from clinica.core.catalog import PackageTier
from clinica.models.client import ClientStatus
from clinica.schemas.client_package import ActivePackageOverview


class DashboardClientRow(BaseModel):
    """One row of the clients table"""
    id: int
    name: str
    age: int
    pathology: str
    active_package_type: Optional[PackageTier] = None
    sessions_used: int
    sessions_total: int
    sessions_label: str  # "2 / 5"
    client_status: ClientStatus
    package_badge: Optional[str] = None
    debt: Decimal
    next_session: Optional[datetime] = None


class DashboardStats(BaseModel):
    active_clients: int
    total_clients: int
    monthly_earnings: Decimal
    today_sessions: int


class ClientDetail(BaseModel):
    id: int
    name: str
    age: int
    email: Optional[str] = None
    phone: Optional[str] = None
    pathology: str
    notes: Optional[str] = None
    status: ClientStatus
    total_debt: Decimal
    active_package: Optional[ActivePackageOverview] = None


class CatalogEntry(BaseModel):
    tier: PackageTier
    sessions: int
    suggested_price: Decimal
    display_name: str
