"""Registered application user."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin


class AppUser(TimestampMixin, SQLModel, table=True):
    __tablename__ = "app_users"

    id: str = Field(primary_key=True)
    full_name: str = Field(nullable=False, index=True)
    email: str = Field(nullable=False, unique=True)
    role: str = Field(nullable=False)  # see cdb_shared.schemas.common.UserRole
    description: Optional[str] = None
    added_by: Optional[str] = None
    last_login: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    is_locked: bool = Field(default=False, nullable=False)
