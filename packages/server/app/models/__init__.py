# SQLModel definitions; imported here to ensure metadata is populated for create_all.
from .base import IntIDMixin, TimestampMixin  # noqa: F401
from .company import Company  # noqa: F401
from .project import Project  # noqa: F401
from .contact import Contact  # noqa: F401
from .app_user import AppUser  # noqa: F401
from .collaboration import Collaboration, CollaborationDraft  # noqa: F401
