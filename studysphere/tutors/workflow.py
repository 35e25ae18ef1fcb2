"""
Tutor application decisions

Approving or rejecting an application is two writes: the application status,
then the applicant's role (approved -> tutor, rejected -> user). They are not
wrapped in a transaction. If the role write raises, the application status is
put back to what it was before the call and the error is re-raised.
"""

import logging
from datetime import datetime, timezone

from bson import ObjectId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere.models import ApplicationStatus, ROLE_FOR_DECISION

logger = logging.getLogger(__name__)


async def decide_application(
    db: AsyncIOMotorDatabase,
    application_id: ObjectId,
    status: ApplicationStatus,
    email: str
) -> dict:
    """
    Set the application status and mirror it into the applicant's role.
    The role goes to the email stored on the application; the passed email
    is used only for applications that lack one.

    Returns:
        Update counts of the application write plus roleModifiedCount.
        roleModifiedCount is 0 when no user matches the email, which is not
        treated as an error.

    Raises:
        404: Application not found (role is left untouched)
    """
    previous = await db.tutors.find_one({"_id": application_id}, {"status": 1, "email": 1})
    if not previous:
        raise HTTPException(status_code=404, detail="Tutor application not found")

    applicant = previous.get("email") or email

    result = await db.tutors.update_one(
        {"_id": application_id},
        {"$set": {"status": status.value, "updated_at": datetime.now(timezone.utc)}}
    )

    role = ROLE_FOR_DECISION[status]
    try:
        role_result = await db.users.update_one(
            {"email": applicant},
            {"$set": {"role": role.value}}
        )
    except Exception:
        logger.warning(
            "Role update failed for %s, restoring application %s to %r",
            applicant, application_id, previous.get("status")
        )
        await _restore_status(db, application_id, previous.get("status"))
        raise

    logger.info(
        "Application %s %s, role of %s -> %s (modified: %d)",
        application_id, status.value, applicant, role.value, role_result.modified_count
    )

    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "roleModifiedCount": role_result.modified_count,
    }


async def _restore_status(db: AsyncIOMotorDatabase, application_id: ObjectId, status):
    try:
        await db.tutors.update_one(
            {"_id": application_id},
            {"$set": {"status": status or ApplicationStatus.PENDING.value}}
        )
    except Exception:
        logger.exception("Could not restore application %s, it is now inconsistent", application_id)
