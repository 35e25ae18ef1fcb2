import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere.auth.dependencies import require_auth
from studysphere.bookings.schemas import BookingCreate
from studysphere.database import get_db, insert_result, parse_object_id, serialize_many, serialize_mongo
from studysphere.models import PaidStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookedSessions", tags=["Bookings"])

SERVER_FIELDS = {"_id", "paid_status", "bookedAt", "registrationFee", "sessionTitle", "tutorEmail"}


@router.post("", status_code=201)
async def book_session(
    data: BookingCreate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Book a study session once per student.
    Fee, title and tutor come from the stored session.
    """
    session_id = parse_object_id(data.sessionId, "session id")

    try:
        study_session = await db.study_sessions.find_one({"_id": session_id})
        if not study_session:
            raise HTTPException(status_code=404, detail="Study session not found")

        existing = await db.booked_sessions.find_one({
            "studentEmail": data.studentEmail,
            "sessionId": data.sessionId
        })
        if existing:
            raise HTTPException(status_code=400, detail="You have already booked this session")

        fee = study_session.get("registrationFee") or 0
        booking = {k: v for k, v in data.dict(exclude_none=True).items() if k not in SERVER_FIELDS}
        booking.update({
            "sessionTitle": study_session.get("title"),
            "tutorEmail": study_session.get("tutorEmail"),
            "registrationFee": fee,
            "paid_status": (PaidStatus.FREE if fee == 0 else PaidStatus.UNPAID).value,
            "bookedAt": datetime.now(timezone.utc),
        })

        result = await db.booked_sessions.insert_one(booking)
        logger.info("%s booked session %s", data.studentEmail, data.sessionId)
        return insert_result(result)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error booking session %s for %s", data.sessionId, data.studentEmail)
        raise HTTPException(status_code=500, detail="Failed to book session")


@router.get("")
async def get_booked_sessions(
    email: str = Query(None),
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    if not email:
        raise HTTPException(status_code=400, detail="Email query is required")

    try:
        cursor = db.booked_sessions.find({"studentEmail": email}).sort("bookedAt", -1)
        return serialize_many(await cursor.to_list(length=None))
    except Exception:
        logger.exception("Error fetching bookings of %s", email)
        raise HTTPException(status_code=500, detail="Failed to fetch booked sessions")


@router.get("/{id}")
async def get_booked_session(
    id: str,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    booking_id = parse_object_id(id, "booking id")

    try:
        booking = await db.booked_sessions.find_one({"_id": booking_id})
    except Exception:
        logger.exception("Error fetching booking %s", id)
        raise HTTPException(status_code=500, detail="Failed to fetch booked session")

    if not booking:
        raise HTTPException(status_code=404, detail="Booked session not found")

    return serialize_mongo(booking)
