from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime, timezone
from clinica.db.base import Base


class User(Base):
    """Clinic staff account. Every authenticated user has full access to the ledger."""
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), index=True)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(150), nullable=False)
    token_version = Column(Integer, default=1, nullable=False)  # invalidate old JWTs
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
