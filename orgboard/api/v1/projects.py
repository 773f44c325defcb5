"""
Project endpoints.

POST   /api/v1/projects                       Create (members only)
GET    /api/v1/projects?organizationId=...    List an org's projects (members only)
GET    /api/v1/projects/{id}                  Get one project
PATCH  /api/v1/projects/{id}                  Update (members only)
DELETE /api/v1/projects/{id}                  Delete (creator only)
"""

from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from orgboard.core.auth import Identity, get_current_identity
from orgboard.core.database import get_session
from orgboard.schemas.projects import ProjectCreate, ProjectRead, ProjectUpdate
from orgboard.services import projects as project_service

router = APIRouter()


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    body: ProjectCreate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    project = await project_service.create_project(session, body, identity.user_id)
    await session.commit()
    await session.refresh(project)
    return project


@router.get("", response_model=List[ProjectRead])
async def list_projects(
    organization_id: uuid.UUID = Query(..., alias="organizationId"),
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.list_projects(session, organization_id, identity.user_id)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    return await project_service.get_project_or_404(session, project_id)


@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdate,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    project = await project_service.update_project(session, project_id, body, identity.user_id)
    await session.commit()
    await session.refresh(project)
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    session: AsyncSession = Depends(get_session),
):
    await project_service.delete_project(session, project_id, identity.user_id)
    await session.commit()
    return Response(status_code=204)
