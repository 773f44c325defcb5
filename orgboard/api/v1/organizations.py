"""
Organization endpoints.

POST   /api/v1/organizations                          Create (requester becomes owner + admin)
GET    /api/v1/organizations                          Orgs owned by the requester
GET    /api/v1/organizations/{id}                     Get one org
PATCH  /api/v1/organizations/{id}                     Update (owner only)
DELETE /api/v1/organizations/{id}                     Delete (owner only)
POST   /api/v1/organizations/{id}/members             Invite an existing user (admin only)
GET    /api/v1/organizations/{id}/members             List members
DELETE /api/v1/organizations/{id}/members/{userId}    Remove a member (owner only)
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import Identity, get_current_identity
from orgboard.core.database import get_session
from orgboard.schemas.organizations import MemberInvite, MemberRead, OrgCreate, OrgRead, OrgUpdate
from orgboard.services import organizations as org_service

router = APIRouter()


@router.post("", response_model=OrgRead, status_code=201)
async def create_org(
    body: OrgCreate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.create_org(session, body, identity.user_id)
    await session.commit()
    await session.refresh(org)
    return org


@router.get("", response_model=List[OrgRead])
async def list_orgs(
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await org_service.list_owned_orgs(session, identity.user_id)


@router.get("/{org_id}", response_model=OrgRead)
async def get_org(
    org_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await org_service.get_org_or_404(session, org_id)


@router.patch("/{org_id}", response_model=OrgRead)
async def update_org(
    org_id: uuid.UUID,
    body: OrgUpdate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.update_org(session, org_id, body, identity.user_id)
    await session.commit()
    await session.refresh(org)
    return org


@router.delete("/{org_id}", status_code=204)
async def delete_org(
    org_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    await org_service.delete_org(session, org_id, identity.user_id)
    await session.commit()
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


@router.post("/{org_id}/members", response_model=MemberRead, status_code=201)
async def invite_member(
    org_id: uuid.UUID,
    body: MemberInvite,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    membership = await org_service.invite_member(session, org_id, body, identity.user_id)
    await session.commit()
    await session.refresh(membership)
    return membership


@router.get("/{org_id}/members", response_model=List[MemberRead])
async def list_members(
    org_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await org_service.list_members(session, org_id)


@router.delete("/{org_id}/members/{user_id}", status_code=204)
async def remove_member(
    org_id: uuid.UUID,
    user_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    await org_service.remove_member(session, org_id, user_id, identity.user_id)
    await session.commit()
    return Response(status_code=204)
