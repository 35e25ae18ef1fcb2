import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere.auth.dependencies import require_admin, require_auth
from studysphere.database import get_db, insert_result, parse_object_id, serialize_many, serialize_mongo
from studysphere.models import ApplicationStatus
from studysphere.tutors import workflow
from studysphere.tutors.schemas import ApplicationDecision, TutorApplicationCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tutors", tags=["Tutors"])

# Statuses that block a new application from the same email
OPEN_STATUSES = [ApplicationStatus.PENDING.value, ApplicationStatus.APPROVED.value]


async def _list_by_status(db: AsyncIOMotorDatabase, status: ApplicationStatus) -> list:
    cursor = db.tutors.find({"status": status.value}).sort("created_at", -1)
    return serialize_many(await cursor.to_list(length=None))


@router.get("/approved")
async def get_approved_tutors(db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        return await _list_by_status(db, ApplicationStatus.APPROVED)
    except Exception:
        logger.exception("Error fetching approved tutors")
        raise HTTPException(status_code=500, detail="Failed to fetch approved tutors")


@router.get("/pending")
async def get_pending_tutors(
    admin: dict = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        return await _list_by_status(db, ApplicationStatus.PENDING)
    except Exception:
        logger.exception("Error fetching pending tutors")
        raise HTTPException(status_code=500, detail="Failed to fetch pending tutors")


@router.get("/application/{email}")
async def get_my_application(
    email: str,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Latest application submitted with this email
    """
    try:
        application = await db.tutors.find_one({"email": email}, sort=[("created_at", -1)])
    except Exception:
        logger.exception("Error fetching application of %s", email)
        raise HTTPException(status_code=500, detail="Failed to fetch tutor application")

    if not application:
        raise HTTPException(status_code=404, detail="No tutor application found")

    return serialize_mongo(application)


@router.patch("/status/{id}")
async def update_tutor_status(
    id: str,
    data: ApplicationDecision,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Approve or reject a tutor application; the applicant's role follows
    """
    application_id = parse_object_id(id, "application id")

    try:
        return await workflow.decide_application(db, application_id, data.status, data.email)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating tutor application %s", id)
        raise HTTPException(status_code=500, detail="Failed to update tutor status")


@router.post("", status_code=201)
async def apply_as_tutor(
    data: TutorApplicationCreate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        existing = await db.tutors.find_one({"email": data.email, "status": {"$in": OPEN_STATUSES}})
        if existing:
            raise HTTPException(
                status_code=400,
                detail=f"An application for this email is already {existing['status']}"
            )

        now = datetime.now(timezone.utc)
        application = data.dict()
        application.pop("_id", None)
        application.update({
            "status": ApplicationStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        })

        result = await db.tutors.insert_one(application)
        logger.info("Tutor application submitted by %s", data.email)
        return insert_result(result)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error submitting tutor application for %s", data.email)
        raise HTTPException(status_code=500, detail="Failed to submit tutor application")
