import logging
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from studysphere.models import UserRole

logger = logging.getLogger(__name__)

# Fields a client may not set on its own user record
PROTECTED_FIELDS = {"_id", "role", "created_at", "last_log_in"}


async def upsert_user_on_login(db: AsyncIOMotorDatabase, data: dict) -> dict:
    """
    Insert a first-time user with the default role, otherwise bump last_log_in.
    The existence check and the write are separate calls.
    """
    email = data["email"]
    now = datetime.now(timezone.utc)

    existing = await db.users.find_one({"email": email})
    if existing:
        updated = await db.users.update_one(
            {"email": email},
            {"$set": {"last_log_in": now}}
        )
        return {
            "message": "User already exists, last login updated.",
            "inserted": False,
            "updatedCount": updated.modified_count,
        }

    user = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
    user.update({
        "role": UserRole.USER.value,
        "created_at": now,
        "last_log_in": now,
    })

    result = await db.users.insert_one(user)
    logger.info("Registered new user %s", email)

    return {
        "acknowledged": result.acknowledged,
        "insertedId": str(result.inserted_id),
        "inserted": True,
    }
