"""
Credential & session service: registration, login and token refresh.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import create_token_pair, hash_password, verify_password
from orgboard.core.config import Settings
from orgboard.models.user import User
from orgboard.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, TokenPair, UserSummary
from orgboard.services import users as user_service

log = structlog.get_logger()


def _auth_response(user: User, settings: Settings) -> AuthResponse:
    return AuthResponse(
        user=UserSummary.model_validate(user),
        tokens=TokenPair(**create_token_pair(user.id, user.email, settings)),
    )


async def register(
    session: AsyncSession, req: RegisterRequest, settings: Settings
) -> AuthResponse:
    if await user_service.find_by_email(session, req.email):
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user = await user_service.create_user(
        session,
        email=req.email,
        password_hash=hash_password(req.password, settings.bcrypt_rounds),
        first_name=req.first_name,
        last_name=req.last_name,
    )
    log.info("user.registered", user_id=str(user.id))
    return _auth_response(user, settings)


async def login(session: AsyncSession, req: LoginRequest, settings: Settings) -> AuthResponse:
    user = await user_service.find_by_email(session, req.email)
    if not user or not verify_password(req.password, user.password_hash):
        log.info("auth.login_failure", reason="invalid_credentials")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_active:
        log.info("auth.login_failure", reason="inactive", user_id=str(user.id))
        raise HTTPException(status_code=401, detail="User account is inactive")

    log.info("auth.login_success", user_id=str(user.id))
    return _auth_response(user, settings)


async def refresh(session: AsyncSession, user_id: uuid.UUID, settings: Settings) -> TokenPair:
    user = await session.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Access denied")

    log.info("auth.refreshed", user_id=str(user.id))
    return TokenPair(**create_token_pair(user.id, user.email, settings))
