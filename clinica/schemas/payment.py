"""
Pydantic schemas for payments.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from clinica.core.catalog import PackageTier
from clinica.models.payment import PaymentMethod


class PaymentBase(BaseModel):
    amount: Decimal = Field(..., ge=1, max_digits=10, decimal_places=2)
    payment_date: datetime
    method: PaymentMethod = PaymentMethod.CASH
    notes: Optional[str] = None


class PaymentCreate(PaymentBase):
    package_id: int = Field(..., ge=1)


class PaymentUpdate(PaymentBase):
    pass


class PaymentOut(PaymentBase):
    id: int
    package_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class PaymentHistoryItem(BaseModel):
    id: int
    date: datetime
    amount: Decimal
    method: PaymentMethod
    package_id: int
    package_type: PackageTier
    notes: Optional[str] = None
