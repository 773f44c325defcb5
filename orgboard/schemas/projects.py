"""Project schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel, RequestModel, reject_null


class ProjectCreate(RequestModel):
    name: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    organization_id: uuid.UUID


class ProjectUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class ProjectRead(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    organization_id: uuid.UUID
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime
