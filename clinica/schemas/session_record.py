"""
Pydantic schemas for session records.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from clinica.core.catalog import PackageTier
from clinica.models.session_record import SessionStatus


class SessionCreate(BaseModel):
    """session_number is assigned by the server"""
    package_id: int = Field(..., ge=1)
    session_date: Optional[datetime] = None
    status: SessionStatus = SessionStatus.PENDING


class SessionUpdate(BaseModel):
    session_date: Optional[datetime] = None
    status: SessionStatus


class SessionOut(BaseModel):
    id: int
    package_id: int
    session_number: int
    session_date: Optional[datetime] = None
    status: SessionStatus

    class Config:
        from_attributes = True


class SessionHistoryItem(BaseModel):
    id: int
    session_number: int
    date: Optional[datetime] = None
    package_id: int
    package_type: PackageTier
    status: SessionStatus
