import logging
from datetime import datetime, timezone
from typing import Optional

import jwt
from fastapi import APIRouter, Cookie, Depends, Response
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere import config
from studysphere.auth import jwt_handler
from studysphere.auth.schemas import TokenRequest
from studysphere.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post("/jwt_token")
async def issue_token(data: TokenRequest, response: Response):
    """
    Issue the auth cookie for a signed-in user (1 hour, HTTP-only)
    """
    token = jwt_handler.create_access_token(subject=data.userEmail)
    jwt_handler.set_auth_cookie(response, token)
    return {"message": "successfull"}


@router.post("/api/logout")
async def logout(
    response: Response,
    access_token: Optional[str] = Cookie(None, alias=config.COOKIE_NAME),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """
    Clear the auth cookie and denylist the token until it would have expired
    """
    if access_token:
        await revoke_token(db, access_token)

    jwt_handler.clear_auth_cookie(response)
    return {"message": "Logout successful."}


async def revoke_token(db: AsyncIOMotorDatabase, token: str) -> bool:
    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.InvalidTokenError:
        # Already unusable, nothing to denylist
        return False

    jti = payload.get("jti")
    exp = payload.get("exp")
    if not jti or not exp:
        return False

    try:
        await db.revoked_tokens.update_one(
            {"jti": jti},
            {"$setOnInsert": {
                "jti": jti,
                "email": payload.get("sub"),
                "expires_at": datetime.fromtimestamp(exp, tz=timezone.utc),
            }},
            upsert=True,
        )
    except Exception:
        # Logout still succeeds client side; the token expires on its own
        logger.exception("Failed to denylist token %s", jti)
        return False

    return True
