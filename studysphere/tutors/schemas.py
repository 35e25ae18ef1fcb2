from pydantic import BaseModel, Field, validator
from typing import Optional
from studysphere.models import ApplicationStatus

# ==================== REQUEST SCHEMAS ====================

class TutorApplicationCreate(BaseModel):
    """
    Application submitted by a user who wants to teach.
    Status is always set server-side to pending.
    """
    email: str = Field(..., min_length=3)
    name: Optional[str] = None
    photo: Optional[str] = None
    subject: Optional[str] = None
    experience: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        extra = "allow"

    @validator('email')
    def normalize_email(cls, v):
        if not v.strip():
            raise ValueError('email is required')
        return v.strip()

class ApplicationDecision(BaseModel):
    status: ApplicationStatus
    email: str = Field(..., min_length=3)

    @validator('status')
    def validate_decision(cls, v):
        if v == ApplicationStatus.PENDING:
            raise ValueError('status must be approved or rejected')
        return v
