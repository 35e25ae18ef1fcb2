from pydantic import BaseModel, Field, validator


class TokenRequest(BaseModel):
    userEmail: str = Field(..., min_length=3)

    @validator('userEmail')
    def normalize_email(cls, v):
        if not v.strip():
            raise ValueError('userEmail is required')
        return v.strip()
