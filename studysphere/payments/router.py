import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere import config
from studysphere.auth.dependencies import require_auth
from studysphere.database import get_db, parse_object_id, serialize_many
from studysphere.payments import gateway, service
from studysphere.payments.schemas import PaymentConfirm, PaymentIntentRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payment"])


@router.post("/create-payment-intent")
async def create_payment_intent(
    data: PaymentIntentRequest,
    user: dict = Depends(require_auth)
):
    """
    Create a Razorpay order the client completes checkout against
    """
    try:
        order = await run_in_threadpool(gateway.create_order, data.amount, user["sub"])
    except Exception:
        logger.exception("Razorpay order creation failed for %s", user["sub"])
        raise HTTPException(status_code=500, detail="Failed to create payment intent")

    return {
        "orderId": order["id"],
        "amount": order["amount"],
        "currency": order["currency"],
        "keyId": config.RAZORPAY_KEY_ID,
    }


@router.post("/payments", status_code=201)
async def confirm_payment(
    data: PaymentConfirm,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Mark a booking paid and log the payment.
    A Razorpay checkout signature, when sent, must match before anything is written.
    """
    booking_id = parse_object_id(data.bookingId, "booking id")

    if data.razorpay_order_id or data.razorpay_signature:
        if not (data.razorpay_order_id and data.razorpay_signature):
            raise HTTPException(status_code=400, detail="Both razorpay_order_id and razorpay_signature are required")
        if not gateway.verify_signature(data.razorpay_order_id, data.transactionId, data.razorpay_signature):
            logger.warning("Invalid payment signature for booking %s from %s", data.bookingId, user["sub"])
            raise HTTPException(status_code=400, detail="Invalid payment signature")

    payment = data.dict(exclude_none=True, exclude={"razorpay_signature"})

    try:
        return await service.confirm_payment(db, booking_id, payment)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error confirming payment for booking %s", data.bookingId)
        raise HTTPException(status_code=500, detail="Failed to confirm payment")


@router.get("/payments")
async def get_payment_history(
    email: str = Query(None),
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    if not email:
        raise HTTPException(status_code=400, detail="Email query is required")

    try:
        cursor = db.payments.find({"email": email}).sort("paid_at", -1)
        return serialize_many(await cursor.to_list(length=None))
    except Exception:
        logger.exception("Error fetching payments of %s", email)
        raise HTTPException(status_code=500, detail="Failed to fetch payment history")
