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

router = APIRouter(prefix="/materials", tags=["Materials"])


class MaterialCreate(BaseModel):
    """Study material a tutor attaches to a session (image and/or link)"""
    sessionId: str = Field(..., min_length=1)
    tutorEmail: str = Field(..., min_length=3)
    title: str = Field(..., min_length=1, max_length=200)
    imageUrl: Optional[str] = None
    link: Optional[str] = None

class MaterialUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    imageUrl: Optional[str] = None
    link: Optional[str] = None


@router.post("", status_code=201)
async def upload_material(
    data: MaterialCreate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        now = datetime.now(timezone.utc)
        result = await db.materials.insert_one({**data.dict(), "created_at": now, "updated_at": now})
        return insert_result(result)
    except Exception:
        logger.exception("Error saving material for session %s", data.sessionId)
        raise HTTPException(status_code=500, detail="Failed to save material")


@router.get("")
async def get_materials(
    sessionId: Optional[str] = Query(None),
    tutorEmail: Optional[str] = Query(None),
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = {}
    if sessionId:
        query["sessionId"] = sessionId
    if tutorEmail:
        query["tutorEmail"] = tutorEmail

    try:
        cursor = db.materials.find(query).sort("created_at", -1)
        return serialize_many(await cursor.to_list(length=None))
    except Exception:
        logger.exception("Error fetching materials")
        raise HTTPException(status_code=500, detail="Failed to fetch materials")


@router.patch("/{id}")
async def update_material(
    id: str,
    data: MaterialUpdate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    material_id = parse_object_id(id, "material id")

    updates = data.dict(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="Nothing to update")
    updates["updated_at"] = datetime.now(timezone.utc)

    try:
        result = await db.materials.update_one({"_id": material_id}, {"$set": updates})
    except Exception:
        logger.exception("Error updating material %s", id)
        raise HTTPException(status_code=500, detail="Failed to update material")

    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Material not found")

    return update_result(result)


@router.delete("/{id}")
async def delete_material(
    id: str,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    material_id = parse_object_id(id, "material id")

    try:
        result = await db.materials.delete_one({"_id": material_id})
    except Exception:
        logger.exception("Error deleting material %s", id)
        raise HTTPException(status_code=500, detail="Failed to delete material")

    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Material not found")

    return delete_result(result)
