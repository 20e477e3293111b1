"""Fundraising project model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import IntIDMixin, TimestampMixin


class Project(IntIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    name: Optional[str] = Field(default=None)
    fr_goal: Optional[float] = None  # fundraising goal
