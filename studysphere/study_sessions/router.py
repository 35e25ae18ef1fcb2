import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere.auth.dependencies import require_admin, require_auth
from studysphere.database import (
    delete_result, get_db, insert_result, parse_object_id,
    serialize_many, serialize_mongo, update_result
)
from studysphere.models import SessionStatus
from studysphere.study_sessions.schemas import SessionStatusUpdate, StudySessionCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study_session", tags=["Study Sessions"])

SERVER_FIELDS = {"_id", "status", "rejectionReason", "feedback", "created_at", "updated_at"}


@router.post("", status_code=201)
async def create_study_session(
    data: StudySessionCreate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        now = datetime.now(timezone.utc)
        study_session = {k: v for k, v in data.dict().items() if k not in SERVER_FIELDS}
        study_session.update({
            "status": SessionStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        })

        result = await db.study_sessions.insert_one(study_session)
        return insert_result(result)
    except Exception:
        logger.exception("Error creating study session for %s", data.tutorEmail)
        raise HTTPException(status_code=500, detail="Failed to create study session")


@router.get("")
async def get_study_sessions(
    status: Optional[SessionStatus] = Query(None),
    tutorEmail: Optional[str] = Query(None),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = {}
    if status:
        query["status"] = status.value
    if tutorEmail:
        query["tutorEmail"] = tutorEmail

    try:
        cursor = db.study_sessions.find(query).sort("created_at", -1)
        return serialize_many(await cursor.to_list(length=None))
    except Exception:
        logger.exception("Error fetching study sessions")
        raise HTTPException(status_code=500, detail="Failed to fetch study sessions")


@router.get("/{id}")
async def get_study_session(id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    session_id = parse_object_id(id, "session id")

    try:
        study_session = await db.study_sessions.find_one({"_id": session_id})
    except Exception:
        logger.exception("Error fetching study session %s", id)
        raise HTTPException(status_code=500, detail="Failed to fetch study session")

    if not study_session:
        raise HTTPException(status_code=404, detail="Study session not found")

    return serialize_mongo(study_session)


@router.delete("/{id}")
async def delete_study_session(
    id: str,
    admin: dict = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    session_id = parse_object_id(id, "session id")

    try:
        result = await db.study_sessions.delete_one({"_id": session_id})
    except Exception:
        logger.exception("Error deleting study session %s", id)
        raise HTTPException(status_code=500, detail="Failed to delete study session")

    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Study session not found")

    return delete_result(result)


@router.patch("/{id}/status")
async def update_study_session_status(
    id: str,
    data: SessionStatusUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Admin approves (optionally setting the fee) or rejects a session
    """
    session_id = parse_object_id(id, "session id")

    updates = data.dict(exclude_none=True)
    updates["status"] = data.status.value
    updates["updated_at"] = datetime.now(timezone.utc)

    try:
        result = await db.study_sessions.update_one({"_id": session_id}, {"$set": updates})
    except Exception:
        logger.exception("Error updating status of study session %s", id)
        raise HTTPException(status_code=500, detail="Failed to update study session status")

    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Study session not found")

    logger.info("Study session %s %s by %s", id, data.status.value, admin["sub"])
    return update_result(result)


@router.patch("/resubmit/{id}")
async def resubmit_study_session(
    id: str,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Tutor sends a rejected session back for review
    """
    session_id = parse_object_id(id, "session id")

    try:
        result = await db.study_sessions.update_one(
            {"_id": session_id},
            {
                "$set": {
                    "status": SessionStatus.PENDING.value,
                    "updated_at": datetime.now(timezone.utc)
                },
                "$unset": {"rejectionReason": "", "feedback": ""}
            }
        )
    except Exception:
        logger.exception("Error resubmitting study session %s", id)
        raise HTTPException(status_code=500, detail="Failed to resubmit study session")

    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Study session not found")

    return update_result(result)
