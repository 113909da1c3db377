from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Text
from sqlalchemy.orm import relationship
from clinica.db.base import Base


class PaymentMethod(str, Enum):
    CASH = "Efectivo"
    OTHER = "Otro"


class Payment(Base):
    """A payment made towards a package."""
    __tablename__ = "payments"
    __resource_name__ = "Pago"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("client_packages.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    package = relationship("ClientPackage", back_populates="payments")

    def __repr__(self):
        return f"<Payment(id={self.id}, package_id={self.package_id}, amount={self.amount})>"
