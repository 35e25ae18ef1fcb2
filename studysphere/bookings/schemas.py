from pydantic import BaseModel, Field
from typing import Optional


class BookingCreate(BaseModel):
    """
    Fee, title and tutor are copied from the stored session;
    values sent by the client for them are ignored.
    """
    studentEmail: str = Field(..., min_length=3)
    sessionId: str = Field(..., min_length=1)
    studentName: Optional[str] = None

    class Config:
        extra = "allow"
