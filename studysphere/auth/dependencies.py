from typing import Optional

import jwt
from fastapi import Cookie, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from studysphere import config
from studysphere.auth import jwt_handler
from studysphere.database import get_db
from studysphere.models import UserRole


async def require_auth(
    access_token: Optional[str] = Cookie(None, alias=config.COOKIE_NAME),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> dict:
    """
    Dependency: verifies the auth cookie and returns the decoded principal

    Raises:
        401: Cookie missing, token invalid/expired or revoked at logout
    """
    if not access_token:
        raise HTTPException(status_code=401, detail="Unauthorized Access")

    try:
        payload = jwt_handler.decode_access_token(access_token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Unauthorized Access")

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Unauthorized Access")

    jti = payload.get("jti")
    if jti and await db.revoked_tokens.find_one({"jti": jti}):
        raise HTTPException(status_code=401, detail="Session revoked")

    return payload


async def require_admin(
    principal: dict = Depends(require_auth),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> dict:
    """
    Dependency: principal must map to a user whose role is admin

    Raises:
        401: Not authenticated
        403: No user record, or role is not admin
    """
    user = await db.users.find_one({"email": principal["sub"]})

    if not user or user.get("role") != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Forbidden Access")

    return principal
