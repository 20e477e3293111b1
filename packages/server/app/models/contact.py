"""Contact person model (stored in the legacy ``people`` table)."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import IntIDMixin, utcnow


class Contact(IntIDMixin, SQLModel, table=True):
    __tablename__ = "people"

    name: Optional[str] = Field(default=None, index=True)
    email: Optional[str] = None
    phone: Optional[str] = None
    company_id: Optional[int] = Field(
        default=None, foreign_key="companies.id", ondelete="CASCADE", index=True
    )
    function: Optional[str] = None
    created_at: Optional[datetime] = Field(
        default_factory=utcnow,
        sa_type=sa.DateTime(timezone=True),
    )
