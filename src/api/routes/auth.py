"""Authentication routes.

This module handles admin login and the bearer-token dependency that gates
every admin-only route.
"""

import logging
from datetime import datetime, timedelta
from typing import Annotated, Optional

import pytz
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import AdminManagerDep
from core.exceptions import UnauthorizedError
from models.admin import AdminModel
from schemas.admin import AdminInfo, LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Auth"])

# A missing header is reported as 401 by get_current_admin, not 403 by FastAPI
security = HTTPBearer(auto_error=False)


def create_access_token(admin: AdminModel, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed admin access token.

    Args:
        admin: The authenticated admin.
        expires_delta: Optional lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        Encoded JWT (HS256) carrying adminId, username and an expiry.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": admin.username,
        "adminId": admin.id,
        "username": admin.username,
        "exp": datetime.now(pytz.utc) + expires_delta,
    }
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Verify an admin access token.

    Args:
        token: The raw bearer token.

    Returns:
        The token claims, or None if the token is malformed, badly signed,
        expired, or carries no adminId.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("adminId") is None:
        return None
    return payload


def get_current_admin(
    admin_manager: AdminManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AdminModel:
    """Resolve the admin behind the Authorization header.

    The token is checked before any database access.

    Raises:
        UnauthorizedError: If the header is missing, the token is invalid, or
            the admin no longer exists.
    """
    if credentials is None:
        raise UnauthorizedError()
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedError()

    admin = admin_manager.get_admin_by_id(payload["adminId"])
    if admin is None:
        logger.warning("Token for unknown admin id %s", payload["adminId"])
        raise UnauthorizedError()
    return admin


CurrentAdmin = Annotated[AdminModel, Depends(get_current_admin)]


@router.post("/login", response_model=LoginResponse, summary="Admin login")
def login(req: LoginRequest, admin_manager: AdminManagerDep) -> LoginResponse:
    """Login with username and password.

    Args:
        req: Login request with username and password.
        admin_manager: Injected AdminManager instance.

    Returns:
        LoginResponse with the admin's public info and a bearer token.

    Raises:
        UnauthorizedError: If the credentials do not match.
    """
    admin = admin_manager.authenticate(req.username, req.password)
    token = create_access_token(admin)
    logger.info("Admin logged in: %s", admin.username)
    return LoginResponse(token=token, admin=AdminInfo.model_validate(admin))
