"""
Project service. Projects live inside one organization; creating, listing
and updating require membership, deleting requires authorship.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from orgboard.core.access import load_project, require_creator, require_membership
from orgboard.models.project import Project
from orgboard.schemas.projects import ProjectCreate, ProjectUpdate

log = structlog.get_logger()

get_project_or_404 = load_project


async def create_project(
    session: AsyncSession, req: ProjectCreate, user_id: uuid.UUID
) -> Project:
    await require_membership(session, req.organization_id, user_id)

    project = Project(
        name=req.name,
        description=req.description,
        organization_id=req.organization_id,
        created_by=user_id,
    )
    session.add(project)
    await session.flush()

    log.info("project.created", project_id=str(project.id), org_id=str(project.organization_id))
    return project


async def list_projects(
    session: AsyncSession, organization_id: uuid.UUID, user_id: uuid.UUID
) -> list[Project]:
    await require_membership(session, organization_id, user_id)

    result = await session.execute(
        select(Project)
        .where(Project.organization_id == organization_id)
        .order_by(Project.created_at.desc())
    )
    return list(result.scalars().all())


async def update_project(
    session: AsyncSession,
    project_id: uuid.UUID,
    req: ProjectUpdate,
    user_id: uuid.UUID,
) -> Project:
    project = await get_project_or_404(session, project_id)
    await require_membership(session, project.organization_id, user_id)

    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(project, field, value)
    session.add(project)
    await session.flush()

    log.info("project.updated", project_id=str(project.id))
    return project


async def delete_project(
    session: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    project = await get_project_or_404(session, project_id)
    require_creator(project.created_by, user_id, "Only the project creator can delete it")

    await session.delete(project)
    await session.flush()
    log.info("project.deleted", project_id=str(project_id))
