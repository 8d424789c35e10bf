"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (id + name claims, 30 day expiry)
- FastAPI dependency that loads the profile behind a bearer token
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pymongo.collection import Collection

from profilehub.core.config import get_settings
from profilehub.db.mongodb import get_profiles_collection
from profilehub.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; missing headers are reported as 401 below
bearer_scheme = HTTPBearer(auto_error=False)


class TokenExpiredError(Exception):
    """Raised when a token's exp claim is in the past."""


class InvalidTokenError(Exception):
    """Raised when a token cannot be verified or lacks required claims."""


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable hash
        return False


def create_access_token(profile_id: str, name: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token carrying the profile id and name."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.jwt_expire_days))
    to_encode = {"id": str(profile_id), "name": name, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """
    Decode and verify JWT token.

    Raises:
        TokenExpiredError: signature valid but token expired
        InvalidTokenError: anything else wrong with the token
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise InvalidTokenError("Invalid token") from e

    if not payload.get("id") or not payload.get("name"):
        raise InvalidTokenError("Invalid token")
    return payload


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    collection: Collection = Depends(get_profiles_collection),
) -> dict:
    """
    FastAPI dependency - Get the profile that owns the bearer token.

    Usage:
        @router.get("/me")
        async def route(profile: dict = Depends(get_current_profile)):
            return profile
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Authentication required")

    try:
        payload = decode_token(credentials.credentials)
    except TokenExpiredError:
        logger.warning("Rejected expired token")
        raise _unauthorized("Token expired")
    except InvalidTokenError:
        logger.warning("Rejected invalid token")
        raise _unauthorized("Invalid token")

    profile = ProfileService(collection).get_by_id_and_name(payload["id"], payload["name"])
    if not profile:
        logger.warning("Token for unknown profile id=%s", payload["id"])
        raise _unauthorized("Profile not found")

    return profile
