from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Index, text
from sqlalchemy.orm import relationship
from clinica.core.catalog import session_ceiling
from clinica.db.base import Base


class PackageStatus(str, Enum):
    """Lifecycle: a package is in progress until superseded or closed by staff."""
    ACTIVE = "Activo"
    FINISHED = "Terminado"


class PaymentStatus(str, Enum):
    """Stored balance flag, kept in sync with the payments by the coordinator."""
    OWED = "Adeudo"
    PAID = "Pagado"


class ClientPackage(Base):
    """
    A bundle of sessions purchased by a client.

    Attributes:
        package_type: Catalog tier ('S1', 'S5', 'S10', 'S15', 'S20')
        total_price: Agreed price, may differ from the catalog suggestion
        status: 'Activo' or 'Terminado'
        payment_status: 'Adeudo' or 'Pagado'
        last_session_number: Highest session number ever issued for this package
    """
    __tablename__ = "client_packages"
    __resource_name__ = "Paquete"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    package_type = Column(String(5), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    status = Column(String(20), nullable=False, default=PackageStatus.ACTIVE.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.OWED.value)
    last_session_number = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    client = relationship("Client", foreign_keys=[client_id], back_populates="packages")
    sessions = relationship(
        "SessionRecord",
        back_populates="package",
        passive_deletes=True,
        order_by="SessionRecord.session_number",
    )
    payments = relationship(
        "Payment",
        back_populates="package",
        passive_deletes=True,
        order_by="Payment.payment_date",
    )

    # Constraints
    __table_args__ = (
        # At most one package in progress per client
        Index(
            "uq_client_packages_one_active",
            "client_id",
            unique=True,
            postgresql_where=text("status = 'Activo'"),
            sqlite_where=text("status = 'Activo'"),
        ),
    )

    def __repr__(self):
        return f"<ClientPackage(id={self.id}, client_id={self.client_id}, type='{self.package_type}', status='{self.status}')>"

    @property
    def is_active(self) -> bool:
        return self.status == PackageStatus.ACTIVE.value

    @property
    def session_ceiling(self) -> int:
        return session_ceiling(self.package_type)
