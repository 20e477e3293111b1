"""Company model."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import IntIDMixin


class Company(IntIDMixin, SQLModel, table=True):
    __tablename__ = "companies"

    name: Optional[str] = Field(default=None, index=True)
    url: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    budgeting_month: Optional[str] = None
    comment: Optional[str] = None
