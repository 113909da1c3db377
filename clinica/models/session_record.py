from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from clinica.db.base import Base


class SessionStatus(str, Enum):
    PENDING = "Pendiente"
    COMPLETED = "Completada"
    CANCELLED = "Cancelada"


class SessionRecord(Base):
    """
    One attendance entry of a package.

    session_number is assigned at creation and never changes; deleting a session
    leaves a gap in the numbering.
    """
    __tablename__ = "session_records"
    __resource_name__ = "Sesión"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("client_packages.id", ondelete="CASCADE"), nullable=False, index=True)
    session_number = Column(Integer, nullable=False)
    session_date = Column(DateTime(timezone=True), nullable=True, index=True)
    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    package = relationship("ClientPackage", back_populates="sessions")

    # Constraints
    __table_args__ = (
        UniqueConstraint('package_id', 'session_number', name='uq_session_records_number'),
    )

    def __repr__(self):
        return f"<SessionRecord(id={self.id}, package_id={self.package_id}, number={self.session_number}, status='{self.status}')>"
