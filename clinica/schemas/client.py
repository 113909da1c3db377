"""
Pydantic schemas for clinic clients.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from clinica.models.client import ClientStatus


class ClientBase(BaseModel):
    """Fields captured by the client form"""
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=1)
    pathology: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    notes: Optional[str] = None

    @field_validator("email", "phone", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # Forms send "" for untouched optional inputs
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("name", "pathology", mode="before")
    @classmethod
    def strip_required(cls, v):
        return v.strip() if isinstance(v, str) else v


class ClientCreate(ClientBase):
    """Schema for registering a new client (always starts 'Activo')"""
    pass


class ClientUpdate(ClientBase):
    """Full overwrite of a client's editable fields"""
    status: ClientStatus


class ClientOut(ClientBase):
    """Schema for client output"""
    id: int
    email: Optional[str] = None
    status: ClientStatus
    active_package_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
