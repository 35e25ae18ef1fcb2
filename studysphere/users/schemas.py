from pydantic import BaseModel, Field, validator
from typing import Optional
from studysphere.models import UserRole

# ==================== REQUEST SCHEMAS ====================

class UserCreate(BaseModel):
    """
    Profile sent by the client right after sign-in.
    Extra profile fields are stored as sent; role is always server-assigned.
    """
    email: str = Field(..., min_length=3)
    name: Optional[str] = None
    photo: Optional[str] = None

    class Config:
        extra = "allow"

    @validator('email')
    def normalize_email(cls, v):
        if not v.strip():
            raise ValueError('email is required')
        return v.strip()

class RoleUpdate(BaseModel):
    role: UserRole
