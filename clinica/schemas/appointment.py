"""
Pydantic schemas for appointments (calendar stub).
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AppointmentCreate(BaseModel):
    client_id: int = Field(..., ge=1)
    start_time: datetime
    end_time: datetime
    cal_event_id: Optional[str] = Field(None, max_length=100)


class AppointmentOut(AppointmentCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
