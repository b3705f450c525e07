import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from jose import jwt as jose_jwt
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from .database import get_db
from .models import UserRole

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

security = HTTPBearer(auto_error=False)


class AuthUser(BaseModel):
    """Authenticated caller resolved from the access token"""

    id: str
    email: Optional[str] = None


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the managed auth service.
    Tokens are HS256 JWTs signed with the project's JWT secret.
    """
    if not SUPABASE_JWT_SECRET:
        logger.error("❌ SUPABASE_JWT_SECRET not configured")
        raise HTTPException(status_code=500, detail="Authentication not configured")

    try:
        claims = jose_jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"🚫 Invalid access token: {e}")
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token") from e

    if not claims.get("sub"):
        logger.warning("🚫 Access token missing subject")
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token")

    return claims


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """Resolve the caller from the Authorization header (required)"""
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized: No authorization header")

    claims = verify_access_token(credentials.credentials)
    return AuthUser(id=claims["sub"], email=claims.get("email"))


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthUser]:
    """Resolve the caller if a valid token was sent, otherwise None"""
    if not credentials or not credentials.credentials:
        return None
    try:
        claims = verify_access_token(credentials.credentials)
    except HTTPException:
        return None
    return AuthUser(id=claims["sub"], email=claims.get("email"))


def has_role(db: Session, user_id: str, role: str) -> bool:
    """Check the user_roles table for a role assignment"""
    return (
        db.query(UserRole).filter(UserRole.user_id == user_id, UserRole.role == role).first()
        is not None
    )


async def require_admin(
    user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)
) -> AuthUser:
    """Dependency that only lets admins through"""
    if not has_role(db, user.id, "admin"):
        logger.warning(f"🚫 Admin role check failed for user {user.id}")
        raise HTTPException(status_code=403, detail="Forbidden: Admin access required")
    logger.info(f"Admin {user.email} authorized")
    return user
