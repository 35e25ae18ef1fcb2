from pydantic import BaseModel, Field
from typing import Optional

# ==================== REQUEST SCHEMAS ====================

class PaymentIntentRequest(BaseModel):
    amount: float = Field(..., gt=0)  # major currency units, e.g. rupees

class PaymentConfirm(BaseModel):
    bookingId: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    amount: float = Field(..., ge=0)
    transactionId: str = Field(..., min_length=1)
    sessionId: Optional[str] = None
    sessionTitle: Optional[str] = None
    razorpay_order_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
