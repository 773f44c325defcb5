# SQLModel definitions: imported here to ensure metadata is populated for Alembic.
from .base import CreatedAtMixin, TimestampMixin, UUIDMixin  # noqa: F401
from .user import User  # noqa: F401
from .organization import Organization  # noqa: F401
from .organization_member import OrganizationMember  # noqa: F401
from .project import Project  # noqa: F401
from .task import Task  # noqa: F401
from .comment import Comment  # noqa: F401
