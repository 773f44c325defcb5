"""
User directory endpoints.

GET    /api/v1/users         List users
GET    /api/v1/users/{id}    Get a user
PATCH  /api/v1/users/{id}    Update your own profile
DELETE /api/v1/users/{id}    Delete your own account
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import Identity, get_current_identity
from orgboard.core.database import get_session
from orgboard.schemas.users import UserRead, UserUpdate
from orgboard.services import users as user_service

router = APIRouter()


@router.get("", response_model=List[UserRead])
async def list_users(
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.list_users(session)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await user_service.get_user_or_404(session, user_id)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: uuid.UUID,
    body: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    user = await user_service.update_user(session, user_id, body, identity.user_id)
    await session.commit()
    await session.refresh(user)
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    await user_service.delete_user(session, user_id, identity.user_id)
    await session.commit()
    return Response(status_code=204)
