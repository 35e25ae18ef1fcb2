import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field

from studysphere.auth.dependencies import require_auth
from studysphere.database import (
    delete_result, get_db, insert_result, parse_object_id,
    serialize_many, update_result
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Notes"])


class NoteCreate(BaseModel):
    email: str = Field(..., min_length=3)
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""

class NoteUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None


def verify_note_owner(email: str, user: dict) -> None:
    """Notes are private to the signed-in user"""
    if email != user["sub"]:
        raise HTTPException(status_code=403, detail="Not authorized to access these notes")


@router.post("", status_code=201)
async def create_note(
    data: NoteCreate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    verify_note_owner(data.email, user)

    try:
        now = datetime.now(timezone.utc)
        result = await db.notes.insert_one({**data.dict(), "created_at": now, "updated_at": now})
        return insert_result(result)
    except Exception:
        logger.exception("Error creating note for %s", data.email)
        raise HTTPException(status_code=500, detail="Failed to create note")


@router.get("")
async def get_notes(
    email: str = Query(None),
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    if not email:
        raise HTTPException(status_code=400, detail="Email query is required")
    verify_note_owner(email, user)

    try:
        cursor = db.notes.find({"email": email}).sort("updated_at", -1)
        return serialize_many(await cursor.to_list(length=None))
    except Exception:
        logger.exception("Error fetching notes of %s", email)
        raise HTTPException(status_code=500, detail="Failed to fetch notes")


@router.put("/{id}")
async def update_note(
    id: str,
    data: NoteUpdate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    note_id = parse_object_id(id, "note id")

    updates = data.dict(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="Nothing to update")
    updates["updated_at"] = datetime.now(timezone.utc)

    try:
        # Someone else's note looks the same as a missing one
        result = await db.notes.update_one(
            {"_id": note_id, "email": user["sub"]},
            {"$set": updates}
        )
    except Exception:
        logger.exception("Error updating note %s", id)
        raise HTTPException(status_code=500, detail="Failed to update note")

    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Note not found")

    return update_result(result)


@router.delete("/{id}")
async def delete_note(
    id: str,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    note_id = parse_object_id(id, "note id")

    try:
        result = await db.notes.delete_one({"_id": note_id, "email": user["sub"]})
    except Exception:
        logger.exception("Error deleting note %s", id)
        raise HTTPException(status_code=500, detail="Failed to delete note")

    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Note not found")

    return delete_result(result)
