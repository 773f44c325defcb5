"""
User directory service: lookups and self-service profile changes.
"""

from __future__ import annotations

import uuid
from typing import Optional, Sequence

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from orgboard.models.user import User
from orgboard.schemas.users import UserUpdate

log = structlog.get_logger()


async def get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail=f"User with id {user_id} not found")
    return user


async def find_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def load_users(session: AsyncSession, user_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, User]:
    """Fetch several users at once, keyed by id."""
    if not user_ids:
        return {}
    result = await session.execute(select(User).where(User.id.in_(set(user_ids))))
    return {user.id: user for user in result.scalars().all()}


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def create_user(
    session: AsyncSession,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
) -> User:
    user = User(
        email=email,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
    )
    session.add(user)
    await session.flush()
    return user


def _require_self(user_id: uuid.UUID, requester_id: uuid.UUID, action: str) -> None:
    if user_id != requester_id:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own account")


async def update_user(
    session: AsyncSession,
    user_id: uuid.UUID,
    req: UserUpdate,
    requester_id: uuid.UUID,
) -> User:
    user = await get_user_or_404(session, user_id)
    _require_self(user_id, requester_id, "update")

    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    session.add(user)
    await session.flush()

    log.info("user.updated", user_id=str(user.id))
    return user


async def delete_user(
    session: AsyncSession, user_id: uuid.UUID, requester_id: uuid.UUID
) -> None:
    user = await get_user_or_404(session, user_id)
    _require_self(user_id, requester_id, "delete")

    await session.delete(user)
    await session.flush()
    log.info("user.deleted", user_id=str(user_id))
