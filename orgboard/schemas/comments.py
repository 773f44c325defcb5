"""Comment schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from .common import CamelModel, RequestModel


class CommentCreate(RequestModel):
    content: str = Field(min_length=1)
    task_id: uuid.UUID


class CommentUpdate(RequestModel):
    content: str = Field(min_length=1)


class CommentRead(CamelModel):
    id: uuid.UUID
    content: str
    task_id: uuid.UUID
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime
