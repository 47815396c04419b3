"""
Session authentication for the web API.

The host application signs users in and issues the `session` cookie: an
HS256 JWT whose `sub` is the host user id and whose `role` is the user's
role name. This module only verifies it.
"""

import os
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, Request

JWT_SECRET = os.environ.get("JWT_SECRET")
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = 24
ADMIN_ROLE = "admin"


def create_jwt(user_id: int, role: str | None = None) -> str:
    """
    Create a signed session token for a host user.

    Args:
        user_id: The host user's id
        role: The host role name (e.g. "admin")

    Returns:
        Signed JWT token string
    """
    if not JWT_SECRET:
        raise ValueError("JWT_SECRET environment variable not set")

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=JWT_EXPIRATION_HOURS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_jwt(token: str) -> dict | None:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded payload dict if valid, None if invalid
    """
    if not JWT_SECRET:
        raise ValueError("JWT_SECRET environment variable not set")

    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


async def get_current_user(request: Request) -> dict:
    """
    FastAPI dependency to get the current authenticated user.

    Extracts the session cookie and validates the JWT.

    Raises:
        HTTPException: 401 if not authenticated or invalid token
    """
    token = request.cookies.get("session")
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = verify_jwt(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return payload


def get_user_id(payload: dict) -> int:
    """Host user id from a session payload."""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid user session") from None


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """
    FastAPI dependency allowing only users holding the admin role.

    Raises:
        HTTPException: 401 if not authenticated, 403 if not an admin
    """
    if user.get("role") != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Admins only")
    return user
