"""
Bearer token authentication for the API.

Tokens are HS256 JWTs signed with JWT_SECRET. The user id comes from the
'sub' claim (or 'id' for older tokens); 'role' defaults to "user".

Dependencies:
- authenticate: any valid token
- require_admin: valid token with role "admin"
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Header, HTTPException, status
from jose import JWTError, jwt

from api.config import AuthConfig

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_access_token(
    user_id: str,
    role: str = "user",
    expires_delta: Optional[timedelta] = None,
    secret: Optional[str] = None,
) -> str:
    """
    Create a signed access token.

    Args:
        user_id: Stored in both 'sub' and 'id'
        role: "user" or "admin"
        expires_delta: Lifetime (default: 24 hours)
        secret: Signing secret (default: JWT_SECRET)

    Raises:
        RuntimeError: If no signing secret is configured
    """
    signing_secret = secret or AuthConfig.get_jwt_secret()
    if not signing_secret:
        raise RuntimeError("JWT_SECRET is not configured")

    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    claims = {"sub": user_id, "id": user_id, "role": role, "exp": expire}
    return jwt.encode(claims, signing_secret, algorithm=AuthConfig.get_jwt_algorithm())


def get_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    parts = (authorization or "").split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a token.

    Raises:
        HTTPException 500: If JWT_SECRET is not configured
        HTTPException 401: If the token is invalid or expired
    """
    secret = AuthConfig.get_jwt_secret()
    if not secret:
        logger.error("Authenticated route called but JWT_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server authentication not configured",
        )
    try:
        return jwt.decode(token, secret, algorithms=[AuthConfig.get_jwt_algorithm()])
    except JWTError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        ) from e


def authenticate(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    FastAPI dependency resolving the caller from the Authorization header.

    Raises:
        HTTPException 401: Missing or invalid token, or token without a user id
        HTTPException 500: JWT_SECRET not configured
    """
    token = get_token_from_header(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    payload = decode_token(token)
    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )
    return AuthenticatedUser(id=str(user_id), role=payload.get("role") or "user")


def require_admin(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    FastAPI dependency allowing administrators only.

    Raises:
        HTTPException 403: Authenticated caller is not an admin
    """
    user = authenticate(authorization)
    if not user.is_admin:
        logger.warning("User %s attempted an admin-only operation", user.id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
