"""Shared schema bases, enums and pagination envelopes."""

from __future__ import annotations

from enum import Enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serializes with camelCase keys; accepts either camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    """Request bodies reject unknown fields."""

    model_config = ConfigDict(extra="forbid")


def reject_null(value, field_name: str):
    """Patch bodies may omit a non-nullable column but not set it to null."""
    if value is None:
        raise ValueError(f"{field_name} must not be null")
    return value


class OrganizationRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PaginationMeta(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Paginated(CamelModel, Generic[T]):
    data: List[T]
    meta: PaginationMeta
