"""
Task service: CRUD and filtered, paginated listing.

A task's tenant is its project's organization. Any member may create, list
or update tasks; only the creator may delete one.
"""

from __future__ import annotations

import math
import uuid
from typing import Optional

import structlog
from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from orgboard.core.access import (
    load_project,
    organization_id_for_task,
    require_creator,
    require_membership,
)
from orgboard.models.task import Task
from orgboard.schemas.common import PaginationMeta, TaskPriority, TaskStatus
from orgboard.schemas.tasks import TaskCreate, TaskPage, TaskRead, TaskUpdate

log = structlog.get_logger()


async def get_task_or_404(session: AsyncSession, task_id: uuid.UUID) -> Task:
    task = await session.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail=f"Task with id {task_id} not found")
    return task


async def create_task(
    session: AsyncSession, req: TaskCreate, user_id: uuid.UUID
) -> Task:
    project = await load_project(session, req.project_id)
    await require_membership(session, project.organization_id, user_id)

    task = Task(
        title=req.title,
        description=req.description,
        status=req.status.value,
        priority=req.priority.value,
        project_id=project.id,
        created_by=user_id,
        assigned_to=req.assigned_to,
        due_date=req.due_date,
    )
    session.add(task)
    await session.flush()

    log.info("task.created", task_id=str(task.id), project_id=str(project.id))
    return task


async def list_tasks(
    session: AsyncSession,
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    *,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to: Optional[uuid.UUID] = None,
    page: int = 1,
    limit: int = 10,
) -> TaskPage:
    """One page of a project's tasks, newest first, with total counts."""
    project = await load_project(session, project_id)
    await require_membership(session, project.organization_id, user_id)

    conditions = [Task.project_id == project.id]
    if status:
        conditions.append(Task.status == status.value)
    if priority:
        conditions.append(Task.priority == priority.value)
    if assigned_to:
        conditions.append(Task.assigned_to == assigned_to)

    total = (
        await session.execute(select(func.count()).select_from(Task).where(*conditions))
    ).scalar_one()

    result = await session.execute(
        select(Task)
        .where(*conditions)
        .order_by(Task.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    tasks = result.scalars().all()

    return TaskPage(
        data=[TaskRead.model_validate(t) for t in tasks],
        meta=PaginationMeta(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        ),
    )


async def update_task(
    session: AsyncSession,
    task_id: uuid.UUID,
    req: TaskUpdate,
    user_id: uuid.UUID,
) -> Task:
    task = await get_task_or_404(session, task_id)
    org_id = await organization_id_for_task(session, task)
    await require_membership(session, org_id, user_id)

    data = req.model_dump(exclude_unset=True)
    for key in ("status", "priority"):
        if key in data:
            data[key] = data[key].value
    for field, value in data.items():
        setattr(task, field, value)
    session.add(task)
    await session.flush()

    log.info("task.updated", task_id=str(task.id), fields=sorted(data))
    return task


async def delete_task(
    session: AsyncSession, task_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    task = await get_task_or_404(session, task_id)
    require_creator(task.created_by, user_id, "Only the task creator can delete it")

    await session.delete(task)
    await session.flush()
    log.info("task.deleted", task_id=str(task_id))
