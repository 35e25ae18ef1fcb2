import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field

from studysphere.auth.dependencies import require_auth
from studysphere.database import get_db, insert_result, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


class ReviewCreate(BaseModel):
    sessionId: str = Field(..., min_length=1)
    studentEmail: str = Field(..., min_length=3)
    studentName: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    content: str = Field(..., min_length=1, max_length=2000)


@router.post("", status_code=201)
async def post_review(
    data: ReviewCreate,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        review = data.dict()
        review["created_at"] = datetime.now(timezone.utc)
        result = await db.reviews.insert_one(review)
        return insert_result(result)
    except Exception:
        logger.exception("Error saving review for session %s", data.sessionId)
        raise HTTPException(status_code=500, detail="Failed to save review")


@router.get("")
async def get_reviews(
    sessionId: Optional[str] = Query(None),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    query = {"sessionId": sessionId} if sessionId else {}

    try:
        cursor = db.reviews.find(query).sort("created_at", -1)
        return serialize_many(await cursor.to_list(length=None))
    except Exception:
        logger.exception("Error fetching reviews")
        raise HTTPException(status_code=500, detail="Failed to fetch reviews")
