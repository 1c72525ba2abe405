# ============================================================================
# FILE: salonbook/api/dependencies.py
# Bearer token verification for salon API routes
# ============================================================================
import enum
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel

from salonbook.config.settings import settings


class Role(str, enum.Enum):
    CLIENT = "CLIENT"
    OWNER = "OWNER"


class Principal(BaseModel):
    """Caller identity taken from a verified access token"""
    user_id: str
    role: Role
    full_name: Optional[str] = None

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER


# ============================================================================
# Security Schemes
# ============================================================================

jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your JWT access token"
)


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise _credentials_error(f"Could not validate credentials: {str(e)}")

    if payload.get("type") != "access":
        raise _credentials_error("Invalid token type")

    return payload


# ============================================================================
# Authentication Dependencies
# ============================================================================

async def get_current_principal(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security)
) -> Principal:
    """
    Dependency returning the authenticated caller.

    Raises:
        HTTPException 401: If token is invalid or lacks a subject/role
    """
    payload = verify_access_token(credentials.credentials)

    user_id = payload.get("sub")
    if user_id is None:
        raise _credentials_error("Could not validate credentials")

    try:
        role = Role(payload.get("role", Role.CLIENT.value))
    except ValueError:
        raise _credentials_error("Invalid role in token")

    return Principal(user_id=str(user_id), role=role, full_name=payload.get("name"))


async def require_owner(
        principal: Principal = Depends(get_current_principal)
) -> Principal:
    """Dependency restricting a route to the salon owner"""
    if not principal.is_owner:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner role required"
        )
    return principal
