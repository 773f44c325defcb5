"""
Authentication endpoints.

POST /api/v1/auth/register  Create an account and return a token pair
POST /api/v1/auth/login     Exchange email/password for a token pair
POST /api/v1/auth/refresh   Exchange a refresh token for a new pair
POST /api/v1/auth/logout    Stateless; tokens expire on their own
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import Identity, get_refresh_identity
from orgboard.core.config import Settings, get_app_settings
from orgboard.core.database import get_session
from orgboard.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, TokenPair
from orgboard.services import auth as auth_service

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    response = await auth_service.register(session, body, settings)
    await session.commit()
    return response


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    return await auth_service.login(session, body, settings)


@router.post("/refresh", response_model=TokenPair)
async def refresh(
    identity: Identity = Depends(get_refresh_identity),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    """Requires ``Authorization: Bearer <refresh token>``."""
    return await auth_service.refresh(session, identity.user_id, settings)


@router.post("/logout", status_code=204)
async def logout():
    return Response(status_code=204)
