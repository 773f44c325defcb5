"""
Credential verification for Orgboard.

- Password hashing with bcrypt
- Access / refresh JWT pairs signed with distinct secrets
- Bearer token dependencies that yield an explicit ``Identity``
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, HTTPException
from fastapi.security import APIKeyHeader

from orgboard.core.config import Settings, get_app_settings

log = structlog.get_logger()

bearer_header = APIKeyHeader(name="Authorization", auto_error=False)

ACCESS = "access"
REFRESH = "refresh"

# bcrypt input limit, in UTF-8 bytes.
BCRYPT_MAX_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash. Over-long input never matches."""
    if len(password.encode()) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(password.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def _secret_for(kind: str, settings: Settings) -> str:
    return settings.jwt_refresh_secret if kind == REFRESH else settings.jwt_secret


def _encode(user_id: uuid.UUID, email: str, kind: str, lifetime: int, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "type": kind,
        "iat": now,
        "exp": now + timedelta(seconds=lifetime),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _secret_for(kind, settings), algorithm=settings.jwt_algorithm)


def create_token_pair(user_id: uuid.UUID, email: str, settings: Settings) -> dict[str, str]:
    """Issue a fresh access/refresh token pair for a user."""
    return {
        "access_token": _encode(user_id, email, ACCESS, settings.jwt_expires_in, settings),
        "refresh_token": _encode(
            user_id, email, REFRESH, settings.jwt_refresh_expires_in, settings
        ),
    }


def decode_token(token: str, kind: str, settings: Settings) -> dict:
    """Decode and verify a JWT of the given kind. Raises jwt.PyJWTError on failure."""
    payload = jwt.decode(
        token,
        _secret_for(kind, settings),
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
    if payload.get("type") != kind:
        raise jwt.InvalidTokenError(f"Expected a {kind} token")
    return payload


# ---------------------------------------------------------------------------
# Identity dependencies
# ---------------------------------------------------------------------------

class Identity:
    """The verified subject of a bearer token."""

    def __init__(self, user_id: uuid.UUID, email: str):
        self.user_id = user_id
        self.email = email

    def __repr__(self) -> str:
        return f"Identity(user_id={self.user_id}, email={self.email!r})"


def _identity_from_header(
    authorization: Optional[str], kind: str, settings: Settings
) -> Identity:
    scheme, _, token = (authorization or "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        payload = decode_token(token, kind, settings)
        user_id = uuid.UUID(payload["sub"])
    except (jwt.PyJWTError, ValueError):
        log.info("auth.token_rejected", kind=kind)
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return Identity(user_id=user_id, email=payload.get("email", ""))


async def get_current_identity(
    authorization: Optional[str] = Depends(bearer_header),
    settings: Settings = Depends(get_app_settings),
) -> Identity:
    """Main authentication dependency: verifies a bearer access token."""
    return _identity_from_header(authorization, ACCESS, settings)


async def get_refresh_identity(
    authorization: Optional[str] = Depends(bearer_header),
    settings: Settings = Depends(get_app_settings),
) -> Identity:
    """Verifies a bearer refresh token; used only by the refresh endpoint."""
    return _identity_from_header(authorization, REFRESH, settings)
