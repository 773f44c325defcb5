"""
Task endpoints.

List filters: status, priority, assignedTo. Results are paginated with
``page`` (from 1) and ``limit`` (1-100) and wrapped as ``{data, meta}``.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import Identity, get_current_identity
from orgboard.core.database import get_session
from orgboard.schemas.common import TaskPriority, TaskStatus
from orgboard.schemas.tasks import TaskCreate, TaskPage, TaskRead, TaskUpdate
from orgboard.services import tasks as task_service

router = APIRouter()


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    task = await task_service.create_task(session, body, identity.user_id)
    await session.commit()
    await session.refresh(task)
    return task


@router.get("", response_model=TaskPage)
async def list_tasks(
    project_id: uuid.UUID = Query(..., alias="projectId"),
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to: Optional[uuid.UUID] = Query(None, alias="assignedTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await task_service.list_tasks(
        session,
        project_id,
        identity.user_id,
        status=status,
        priority=priority,
        assigned_to=assigned_to,
        page=page,
        limit=limit,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await task_service.get_task_or_404(session, task_id)


@router.patch("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: uuid.UUID,
    body: TaskUpdate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    task = await task_service.update_task(session, task_id, body, identity.user_id)
    await session.commit()
    await session.refresh(task)
    return task


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    await task_service.delete_task(session, task_id, identity.user_id)
    await session.commit()
    return Response(status_code=204)
