"""
Pydantic schemas for staff users.
"""

from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from clinica.core.security import password_policy_error


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    password: str
    confirm_password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        error = password_policy_error(v)
        if error:
            raise ValueError(error)
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Las contraseñas no coinciden")
        return self


class UserOut(UserBase):
    id: int

    class Config:
        from_attributes = True
