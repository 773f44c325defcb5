"""
Comment endpoints.

POST   /api/v1/comments                 Comment on a task (members only)
GET    /api/v1/comments?taskId=...      A task's comments, oldest first
GET    /api/v1/comments/{id}            Get one comment
PATCH  /api/v1/comments/{id}            Edit (author only)
DELETE /api/v1/comments/{id}            Delete (author only)
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import Identity, get_current_identity
from orgboard.core.database import get_session
from orgboard.schemas.comments import CommentCreate, CommentRead, CommentUpdate
from orgboard.services import comments as comment_service

router = APIRouter()


@router.post("", response_model=CommentRead, status_code=201)
async def create_comment(
    body: CommentCreate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    comment = await comment_service.create_comment(session, body, identity.user_id)
    await session.commit()
    await session.refresh(comment)
    return comment


@router.get("", response_model=List[CommentRead])
async def list_comments(
    task_id: uuid.UUID = Query(..., alias="taskId"),
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await comment_service.list_comments(session, task_id, identity.user_id)


@router.get("/{comment_id}", response_model=CommentRead)
async def get_comment(
    comment_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await comment_service.get_comment_or_404(session, comment_id)


@router.patch("/{comment_id}", response_model=CommentRead)
async def update_comment(
    comment_id: uuid.UUID,
    body: CommentUpdate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    comment = await comment_service.update_comment(session, comment_id, body, identity.user_id)
    await session.commit()
    await session.refresh(comment)
    return comment


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    await comment_service.delete_comment(session, comment_id, identity.user_id)
    await session.commit()
    return Response(status_code=204)
