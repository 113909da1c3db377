from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from clinica.db.base import Base


class ClientStatus(str, Enum):
    ACTIVE = "Activo"
    INACTIVE = "Inactivo"


class Client(Base):
    """
    A clinic client (patient).

    Attributes:
        pathology: Diagnosis text shown on the dashboard
        status: 'Activo' or 'Inactivo'
        active_package_id: Pointer to the single package currently in progress.
            Written in the same transaction as the package status changes.
    """
    __tablename__ = "clients"
    __resource_name__ = "Cliente"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    age = Column(Integer, nullable=False)
    pathology = Column(Text, nullable=False)
    email = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=ClientStatus.ACTIVE.value, index=True)
    # use_alter breaks the clients <-> client_packages cycle
    active_package_id = Column(
        Integer,
        ForeignKey("client_packages.id", use_alter=True, name="fk_clients_active_package_id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    packages = relationship(
        "ClientPackage",
        foreign_keys="[ClientPackage.client_id]",
        back_populates="client",
        passive_deletes=True,
    )
    appointments = relationship("Appointment", back_populates="client", passive_deletes=True)

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}', status='{self.status}')>"
