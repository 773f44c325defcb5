"""Task schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import CamelModel, Paginated, RequestModel, TaskPriority, TaskStatus, reject_null


class TaskCreate(RequestModel):
    title: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    project_id: uuid.UUID
    assigned_to: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None


class TaskUpdate(RequestModel):
    """Partial update. The owning project is fixed at creation."""

    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None

    @field_validator("title", "status", "priority")
    @classmethod
    def not_null(cls, value, info):
        return reject_null(value, info.field_name)


class TaskRead(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    project_id: uuid.UUID
    created_by: uuid.UUID
    assigned_to: Optional[uuid.UUID] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


TaskPage = Paginated[TaskRead]
