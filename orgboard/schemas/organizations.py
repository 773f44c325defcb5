"""Organization and membership schemas."""

from __future__ import annotations

import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .auth import UserSummary
from .common import CamelModel, OrganizationRole, RequestModel, reject_null

_HAS_ALNUM = re.compile(r"[A-Za-z0-9]")


def _must_yield_slug(value: Optional[str]) -> Optional[str]:
    if value is not None and not _HAS_ALNUM.search(value):
        raise ValueError("name must contain at least one letter or digit")
    return value


class OrgCreate(RequestModel):
    name: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_yields_slug(cls, value):
        return _must_yield_slug(value)


class OrgUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class OrgRead(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class MemberInvite(RequestModel):
    email: EmailStr
    role: OrganizationRole = OrganizationRole.MEMBER


class MemberRead(CamelModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    user_id: uuid.UUID
    role: OrganizationRole
    created_at: datetime
    user: Optional[UserSummary] = None
