from pydantic import BaseModel, Field, validator
from typing import Optional
from studysphere.models import SessionStatus

# ==================== REQUEST SCHEMAS ====================

class StudySessionCreate(BaseModel):
    """
    Session proposed by a tutor; waits for admin approval
    """
    title: str = Field(..., min_length=1, max_length=200)
    tutorEmail: str = Field(..., min_length=3)
    tutorName: Optional[str] = None
    description: Optional[str] = None
    registrationStart: Optional[str] = None
    registrationEnd: Optional[str] = None
    classStart: Optional[str] = None
    classEnd: Optional[str] = None
    duration: Optional[str] = None
    registrationFee: float = Field(0, ge=0)

    class Config:
        extra = "allow"

class SessionStatusUpdate(BaseModel):
    status: SessionStatus
    registrationFee: Optional[float] = Field(None, ge=0)
    rejectionReason: Optional[str] = None
    feedback: Optional[str] = None

    @validator('status')
    def validate_decision(cls, v):
        if v == SessionStatus.PENDING:
            raise ValueError('status must be approved or rejected')
        return v
