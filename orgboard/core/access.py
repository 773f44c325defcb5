"""
Organization access policy.

Every read-by-parent or mutation of a project, task or comment resolves the
owning organization first and then passes one of these checks before any
write happens:

- membership: a row exists in ``organization_members`` for (org, user)
- role: the membership row carries a specific role
- ownership: the user is the organization's owner
- authorship: the user is the creator-of-record of a row
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from orgboard.models.organization import Organization
from orgboard.models.organization_member import OrganizationMember
from orgboard.models.project import Project
from orgboard.models.task import Task

log = structlog.get_logger()

NOT_A_MEMBER = "You are not a member of this organization"


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


async def get_membership(
    session: AsyncSession, organization_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[OrganizationMember]:
    result = await session.execute(
        select(OrganizationMember).where(
            OrganizationMember.organization_id == organization_id,
            OrganizationMember.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def is_member(
    session: AsyncSession, organization_id: uuid.UUID, user_id: uuid.UUID
) -> bool:
    return await get_membership(session, organization_id, user_id) is not None


async def require_membership(
    session: AsyncSession, organization_id: uuid.UUID, user_id: uuid.UUID
) -> OrganizationMember:
    """Raise 403 unless the user belongs to the organization."""
    membership = await get_membership(session, organization_id, user_id)
    if membership is None:
        log.info("access.denied", reason="not_member", org_id=str(organization_id), user_id=str(user_id))
        raise HTTPException(status_code=403, detail=NOT_A_MEMBER)
    return membership


async def require_role(
    session: AsyncSession,
    organization_id: uuid.UUID,
    user_id: uuid.UUID,
    role: str,
    message: str,
) -> OrganizationMember:
    """Raise 403 with ``message`` unless the user is a member holding ``role``."""
    membership = await get_membership(session, organization_id, user_id)
    if membership is None or membership.role != role:
        log.info("access.denied", reason=f"not_{role}", org_id=str(organization_id), user_id=str(user_id))
        raise HTTPException(status_code=403, detail=message)
    return membership


# ---------------------------------------------------------------------------
# Ownership / authorship
# ---------------------------------------------------------------------------


def require_owner(org: Organization, user_id: uuid.UUID, message: str) -> None:
    if org.owner_id != user_id:
        log.info("access.denied", reason="not_owner", org_id=str(org.id), user_id=str(user_id))
        raise HTTPException(status_code=403, detail=message)


def require_creator(created_by: uuid.UUID, user_id: uuid.UUID, message: str) -> None:
    if created_by != user_id:
        log.info("access.denied", reason="not_creator", user_id=str(user_id))
        raise HTTPException(status_code=403, detail=message)


# ---------------------------------------------------------------------------
# Tenant loaders
# ---------------------------------------------------------------------------


async def load_project(session: AsyncSession, project_id: uuid.UUID) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail=f"Project with id {project_id} not found")
    return project


async def organization_id_for_project(session: AsyncSession, project_id: uuid.UUID) -> uuid.UUID:
    return (await load_project(session, project_id)).organization_id


async def organization_id_for_task(session: AsyncSession, task: Task) -> uuid.UUID:
    return await organization_id_for_project(session, task.project_id)
