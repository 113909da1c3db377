from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from clinica.db.base import Base


class Appointment(Base):
    """
    Calendar slot booked for a client.

    Placeholder for an external calendar integration: rows are stored and listed,
    nothing is scheduled or synchronized.
    """
    __tablename__ = "appointments"
    __resource_name__ = "Cita"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)
    cal_event_id = Column(String(100), nullable=True)  # id in the external calendar
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    client = relationship("Client", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment(id={self.id}, client_id={self.client_id}, start='{self.start_time}')>"
