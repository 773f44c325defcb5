"""
Comment service. Creating and listing go through the task -> project ->
organization chain for a membership check; editing and deleting are
reserved to the author, regardless of organization role.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from orgboard.core.access import organization_id_for_task, require_creator, require_membership
from orgboard.models.comment import Comment
from orgboard.schemas.comments import CommentCreate, CommentUpdate
from orgboard.services.tasks import get_task_or_404

log = structlog.get_logger()


async def get_comment_or_404(session: AsyncSession, comment_id: uuid.UUID) -> Comment:
    comment = await session.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail=f"Comment with id {comment_id} not found")
    return comment


async def _require_task_access(
    session: AsyncSession, task_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    task = await get_task_or_404(session, task_id)
    org_id = await organization_id_for_task(session, task)
    await require_membership(session, org_id, user_id)


async def create_comment(
    session: AsyncSession, req: CommentCreate, user_id: uuid.UUID
) -> Comment:
    await _require_task_access(session, req.task_id, user_id)

    comment = Comment(content=req.content, task_id=req.task_id, created_by=user_id)
    session.add(comment)
    await session.flush()

    log.info("comment.created", comment_id=str(comment.id), task_id=str(req.task_id))
    return comment


async def list_comments(
    session: AsyncSession, task_id: uuid.UUID, user_id: uuid.UUID
) -> list[Comment]:
    """A task's comments, oldest first."""
    await _require_task_access(session, task_id, user_id)

    result = await session.execute(
        select(Comment).where(Comment.task_id == task_id).order_by(Comment.created_at.asc())
    )
    return list(result.scalars().all())


async def update_comment(
    session: AsyncSession,
    comment_id: uuid.UUID,
    req: CommentUpdate,
    user_id: uuid.UUID,
) -> Comment:
    comment = await get_comment_or_404(session, comment_id)
    require_creator(comment.created_by, user_id, "Only the comment creator can update it")

    comment.content = req.content
    session.add(comment)
    await session.flush()

    log.info("comment.updated", comment_id=str(comment.id))
    return comment


async def delete_comment(
    session: AsyncSession, comment_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    comment = await get_comment_or_404(session, comment_id)
    require_creator(comment.created_by, user_id, "Only the comment creator can delete it")

    await session.delete(comment)
    await session.flush()
    log.info("comment.deleted", comment_id=str(comment_id))
