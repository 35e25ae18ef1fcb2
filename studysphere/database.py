import logging
from typing import Optional

from bson import ObjectId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from studysphere import config

logger = logging.getLogger(__name__)

client = AsyncIOMotorClient(config.MONGO_URL)
db = client[config.MONGO_DB_NAME]


async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return db


# ==================== SERIALIZATION ====================

def serialize_mongo(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_many(docs: list[dict]) -> list[dict]:
    return [serialize_mongo(doc) for doc in docs]


def parse_object_id(value: str, label: str = "id") -> ObjectId:
    """Convert a path id to ObjectId, 400 when malformed"""
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {label}")
    return ObjectId(value)


def insert_result(result) -> dict:
    return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}


def update_result(result) -> dict:
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
    }


def delete_result(result) -> dict:
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}


# ==================== STARTUP ====================

async def ping_database(database: AsyncIOMotorDatabase) -> None:
    await database.client.admin.command("ping")
    logger.info("Pinged MongoDB deployment, connection is live")


async def create_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create MongoDB indexes used by the request handlers"""
    await database.users.create_index("email", unique=True)

    await database.tutors.create_index("status")
    await database.tutors.create_index([("email", ASCENDING), ("created_at", DESCENDING)])

    await database.study_sessions.create_index("status")
    await database.study_sessions.create_index("tutorEmail")

    # Lookup index only; duplicate bookings are rejected by the handler
    await database.booked_sessions.create_index([("studentEmail", ASCENDING), ("sessionId", ASCENDING)])

    await database.reviews.create_index([("sessionId", ASCENDING), ("created_at", DESCENDING)])
    await database.notes.create_index("email")
    await database.materials.create_index("sessionId")
    await database.payments.create_index([("email", ASCENDING), ("paid_at", DESCENDING)])

    await database.revoked_tokens.create_index("jti", unique=True)
    await database.revoked_tokens.create_index("expires_at", expireAfterSeconds=0)

    logger.info("StudySphere indexes created")
