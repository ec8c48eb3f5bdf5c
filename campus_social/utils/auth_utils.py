# campus_social/utils/auth_utils.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from bson import ObjectId

from ..config import JWT_SECRET_KEY, JWT_ALGORITHM
from ..db.mongo import users_collection
from .errors import AuthenticationError, InternalError

# Never auto-raise: a missing header is reported as 401 through the error envelope
bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------
def _user_id_from_token(token: str) -> str:
    if not JWT_SECRET_KEY:
        raise InternalError("JWT secret not configured.")
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token.")
    user_id = payload.get("user_id")
    if not user_id or not ObjectId.is_valid(str(user_id)):
        raise AuthenticationError("Invalid token payload.")
    return str(user_id)


async def _load_user_or_401(user_id: str) -> dict:
    user = await users_collection.find_one({"_id": ObjectId(user_id)})
    if not user:
        # Token outlived its account
        raise AuthenticationError("User no longer exists.")
    return user


# ------------------------------------------------------------------
# Public dependencies
# ------------------------------------------------------------------
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """
    Validates the Bearer JWT and loads the user.
    Returns the Mongo user document (with ObjectId _id).
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Authentication required.")
    user_id = _user_id_from_token(credentials.credentials)
    return await _load_user_or_401(user_id)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[dict]:
    """
    Optional auth: returns the user when a valid Bearer token is present, else None.
    Public endpoints use it to personalise (isFollowing, isLiked).
    """
    if not credentials or not credentials.credentials:
        return None
    try:
        user_id = _user_id_from_token(credentials.credentials)
        return await _load_user_or_401(user_id)
    except AuthenticationError:
        return None
