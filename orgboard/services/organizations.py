"""
Organization service: tenant CRUD and membership management.
"""

from __future__ import annotations

import re
import uuid

import structlog
from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from orgboard.core.access import get_membership, require_owner, require_role
from orgboard.models.organization import Organization
from orgboard.models.organization_member import OrganizationMember
from orgboard.schemas.auth import UserSummary
from orgboard.schemas.common import OrganizationRole
from orgboard.schemas.organizations import MemberInvite, MemberRead, OrgCreate, OrgUpdate
from orgboard.services import users as user_service

log = structlog.get_logger()

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase, collapse every run of non-alphanumerics to '-', trim '-' at both ends."""
    return _NON_SLUG_CHARS.sub("-", name.lower()).strip("-")


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------


async def get_org_or_404(session: AsyncSession, org_id: uuid.UUID) -> Organization:
    org = await session.get(Organization, org_id)
    if not org:
        raise HTTPException(status_code=404, detail=f"Organization with id {org_id} not found")
    return org


async def create_org(
    session: AsyncSession, req: OrgCreate, owner_id: uuid.UUID
) -> Organization:
    """Create an org owned by the requester and seed their admin membership."""
    slug = slugify(req.name)
    if not slug:
        raise HTTPException(status_code=400, detail="Organization name must contain letters or digits")

    existing = await session.execute(select(Organization).where(Organization.slug == slug))
    if existing.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Organization with this name already exists")

    org = Organization(
        name=req.name,
        slug=slug,
        description=req.description,
        owner_id=owner_id,
    )
    session.add(org)
    await session.flush()

    session.add(
        OrganizationMember(
            organization_id=org.id,
            user_id=owner_id,
            role=OrganizationRole.ADMIN.value,
        )
    )
    await session.flush()

    log.info("org.created", org_id=str(org.id), slug=slug, owner=str(owner_id))
    return org


async def list_owned_orgs(session: AsyncSession, owner_id: uuid.UUID) -> list[Organization]:
    result = await session.execute(
        select(Organization)
        .where(Organization.owner_id == owner_id)
        .order_by(Organization.created_at.desc())
    )
    return list(result.scalars().all())


async def update_org(
    session: AsyncSession,
    org_id: uuid.UUID,
    req: OrgUpdate,
    requester_id: uuid.UUID,
) -> Organization:
    """Patch name/description. The slug keeps the value derived at creation."""
    org = await get_org_or_404(session, org_id)
    require_owner(org, requester_id, "Only the owner can update the organization")

    for field, value in req.model_dump(exclude_unset=True).items():
        setattr(org, field, value)
    session.add(org)
    await session.flush()

    log.info("org.updated", org_id=str(org.id))
    return org


async def delete_org(
    session: AsyncSession, org_id: uuid.UUID, requester_id: uuid.UUID
) -> None:
    org = await get_org_or_404(session, org_id)
    require_owner(org, requester_id, "Only the owner can delete the organization")

    await session.execute(
        delete(OrganizationMember).where(OrganizationMember.organization_id == org.id)
    )
    await session.delete(org)
    await session.flush()

    log.info("org.deleted", org_id=str(org_id), slug=org.slug)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


async def invite_member(
    session: AsyncSession,
    org_id: uuid.UUID,
    req: MemberInvite,
    requester_id: uuid.UUID,
) -> OrganizationMember:
    """Add an existing user to the org. Only admins may invite."""
    org = await get_org_or_404(session, org_id)
    await require_role(
        session, org.id, requester_id, OrganizationRole.ADMIN.value, "Only admins can invite members"
    )

    user = await user_service.find_by_email(session, req.email)
    if not user:
        raise HTTPException(status_code=404, detail=f"User with email {req.email} not found")

    if await get_membership(session, org.id, user.id):
        raise HTTPException(status_code=409, detail="User is already a member of this organization")

    membership = OrganizationMember(
        organization_id=org.id,
        user_id=user.id,
        role=req.role.value,
    )
    session.add(membership)
    await session.flush()

    log.info(
        "org.member_invited",
        org_id=str(org.id),
        user_id=str(user.id),
        role=membership.role,
        invited_by=str(requester_id),
    )
    return membership


async def list_members(session: AsyncSession, org_id: uuid.UUID) -> list[MemberRead]:
    """Memberships of an org, each with a summary of the member's user."""
    org = await get_org_or_404(session, org_id)
    result = await session.execute(
        select(OrganizationMember)
        .where(OrganizationMember.organization_id == org.id)
        .order_by(OrganizationMember.created_at)
    )
    memberships = list(result.scalars().all())
    users = await user_service.load_users(session, [m.user_id for m in memberships])

    members = []
    for m in memberships:
        user = users.get(m.user_id)
        members.append(
            MemberRead(
                id=m.id,
                organization_id=m.organization_id,
                user_id=m.user_id,
                role=m.role,
                created_at=m.created_at,
                user=UserSummary.model_validate(user) if user else None,
            )
        )
    return members


async def remove_member(
    session: AsyncSession,
    org_id: uuid.UUID,
    member_user_id: uuid.UUID,
    requester_id: uuid.UUID,
) -> None:
    """Owner-only. Removing a user who is not a member is a no-op."""
    org = await get_org_or_404(session, org_id)
    require_owner(org, requester_id, "Only the owner can remove members")
    if member_user_id == requester_id:
        raise HTTPException(status_code=403, detail="Owner cannot remove themselves")

    await session.execute(
        delete(OrganizationMember).where(
            OrganizationMember.organization_id == org.id,
            OrganizationMember.user_id == member_user_id,
        )
    )
    await session.flush()
    log.info("org.member_removed", org_id=str(org.id), user_id=str(member_user_id))
