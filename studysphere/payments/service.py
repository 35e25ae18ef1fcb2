import logging
from datetime import datetime, timezone

from bson import ObjectId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere.models import PaidStatus

logger = logging.getLogger(__name__)


async def confirm_payment(db: AsyncIOMotorDatabase, booking_id: ObjectId, data: dict) -> dict:
    """
    Mark the booking paid, then append the payment record.

    No transaction: if the insert raises, the booking's previous paid_status
    is written back and the error is re-raised. Repeated confirmations
    append repeated payment records.

    Raises:
        404: Booking not found
    """
    booking = await db.booked_sessions.find_one({"_id": booking_id}, {"paid_status": 1})
    if not booking:
        raise HTTPException(status_code=404, detail="Booked session not found")

    booking_result = await db.booked_sessions.update_one(
        {"_id": booking_id},
        {"$set": {"paid_status": PaidStatus.PAID.value}}
    )

    payment = {
        **data,
        "bookingId": str(booking_id),
        "paid_at": datetime.now(timezone.utc),
    }

    try:
        result = await db.payments.insert_one(payment)
    except Exception:
        previous = booking.get("paid_status") or PaidStatus.UNPAID.value
        logger.warning("Payment insert failed for booking %s, restoring paid_status %r", booking_id, previous)
        try:
            await db.booked_sessions.update_one(
                {"_id": booking_id},
                {"$set": {"paid_status": previous}}
            )
        except Exception:
            logger.exception("Could not restore booking %s, it is now marked paid without a payment", booking_id)
        raise

    logger.info("Payment %s recorded for booking %s", data.get("transactionId"), booking_id)

    return {
        "acknowledged": result.acknowledged,
        "insertedId": str(result.inserted_id),
        "bookingModifiedCount": booking_result.modified_count,
    }
