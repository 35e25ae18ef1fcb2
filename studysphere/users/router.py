import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere.auth.dependencies import require_admin, require_auth
from studysphere.database import get_db, parse_object_id, serialize_many
from studysphere.models import UserRole
from studysphere.users import service
from studysphere.users.schemas import RoleUpdate, UserCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

SEARCH_LIMIT = 10


@router.post("")
async def save_user(
    data: UserCreate,
    response: Response,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Upsert by email on every sign-in
    """
    try:
        result = await service.upsert_user_on_login(db, data.dict(exclude_none=True))
        response.status_code = 201 if result["inserted"] else 200
        return result
    except Exception:
        logger.exception("Error saving user %s", data.email)
        raise HTTPException(status_code=500, detail="Failed to save user")


@router.get("")
async def get_all_users(
    admin: dict = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        users = await db.users.find().sort("created_at", -1).to_list(length=None)
        return serialize_many(users)
    except Exception:
        logger.exception("Error fetching users")
        raise HTTPException(status_code=500, detail="Failed to fetch users")


@router.get("/search")
async def search_users(
    email: str = Query(None),
    admin: dict = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Case-insensitive substring match on email, capped at 10 results
    """
    if not email:
        raise HTTPException(status_code=400, detail="Email query is required")

    try:
        cursor = db.users.find(
            {"email": {"$regex": re.escape(email), "$options": "i"}}
        ).limit(SEARCH_LIMIT)
        users = await cursor.to_list(length=SEARCH_LIMIT)
        return serialize_many(users)
    except Exception:
        logger.exception("Error searching users for %r", email)
        raise HTTPException(status_code=500, detail="Failed to search users")


@router.get("/role/{email}")
async def get_user_role(
    email: str,
    user: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    try:
        record = await db.users.find_one({"email": email})

        if not record:
            raise HTTPException(status_code=404, detail="User not found")

        return {"role": record.get("role") or UserRole.USER.value}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error fetching role for %s", email)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.patch("/role/{id}")
async def update_user_role(
    id: str,
    data: RoleUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Admin sets a user's role to admin, user or tutor
    """
    user_id = parse_object_id(id, "user id")
    role = data.role.value

    try:
        result = await db.users.update_one(
            {"_id": user_id},
            {"$set": {"role": role}}
        )
    except Exception:
        logger.exception("Error updating role of user %s", id)
        raise HTTPException(status_code=500, detail="Failed to update user role")

    if result.modified_count == 0:
        raise HTTPException(status_code=404, detail="User not found or role unchanged")

    logger.info("Admin %s set role of user %s to %s", admin["sub"], id, role)
    return {"message": f"User role updated to {role}"}
