"""
Authentication Utility - JWT verification and role guards.

Tokens are issued by the account service; this app only verifies them.
Payload: {"sub": <user id>, "role": "admin" | "student", "email": ...}

Provides:
- JWT token creation/verification
- FastAPI dependencies for protected routes
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from placement_forms.core.config import get_settings
from placement_forms.core.exceptions import AuthorizationError

ADMIN_ROLE = "admin"
STUDENT_ROLE = "student"

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    return {"user_id": str(user_id), "role": payload.get("role"), "email": payload.get("email")}


async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require admin role."""
    if user["role"] != ADMIN_ROLE:
        raise AuthorizationError("Admins only")
    return user


async def get_current_student(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require student role."""
    if user["role"] != STUDENT_ROLE:
        raise AuthorizationError("Students only")
    return user
