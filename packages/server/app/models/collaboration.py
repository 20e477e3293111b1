"""Collaboration model: one company's partnership with one fundraising project.

Tri-state fields (meeting, successful, contact_in_future) are nullable booleans
in storage and ``TriState`` everywhere else. ``CollaborationDraft`` is the
domain-side value; conversion happens only in this module.
"""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from pydantic import BaseModel
from sqlmodel import Field, SQLModel

from cdb_shared.schemas.common import CollaborationType, Priority, TriState

from .base import IntIDMixin, TimestampMixin


class CollaborationDraft(BaseModel):
    """Every settable field of a collaboration, in domain types."""

    company_id: int
    project_id: int
    person_id: Optional[int] = None
    responsible: Optional[str] = None
    comment: Optional[str] = None
    contacted: bool = False
    letter: bool = False
    meeting: TriState = TriState.UNKNOWN
    successful: TriState = TriState.UNKNOWN
    priority: Priority = Priority.LOW
    amount: Optional[float] = None
    contact_in_future: TriState = TriState.UNKNOWN
    type: Optional[CollaborationType] = None


PAIR_CONSTRAINT = "uq_collaborations_company_project"


class Collaboration(IntIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "collaborations"
    __table_args__ = (
        sa.UniqueConstraint("company_id", "project_id", name=PAIR_CONSTRAINT),
        sa.Index("idx_collaborations_updated_at", "updated_at"),
    )

    company_id: int = Field(foreign_key="companies.id", ondelete="CASCADE", nullable=False, index=True)
    project_id: int = Field(foreign_key="projects.id", ondelete="CASCADE", nullable=False, index=True)
    person_id: Optional[int] = Field(default=None, foreign_key="people.id", ondelete="CASCADE", index=True)
    responsible: Optional[str] = Field(default=None, index=True)
    comment: Optional[str] = None
    contacted: bool = Field(default=False, nullable=False)
    successful: Optional[bool] = None
    letter: bool = Field(default=False, nullable=False)
    meeting: Optional[bool] = None
    priority: str = Field(default=Priority.LOW.value, nullable=False)  # Low | Medium | High
    amount: Optional[float] = None
    contact_in_future: Optional[bool] = Field(default=None, index=True)
    type: Optional[str] = None  # Financial | Material | Educational

    @classmethod
    def from_draft(cls, draft: CollaborationDraft, now: datetime) -> "Collaboration":
        row = cls(created_at=now, updated_at=now, company_id=draft.company_id, project_id=draft.project_id)
        row.apply_draft(draft, now)
        return row

    def apply_draft(self, draft: CollaborationDraft, now: datetime) -> None:
        """Replace every settable field and stamp updated_at."""
        self.company_id = draft.company_id
        self.project_id = draft.project_id
        self.person_id = draft.person_id
        self.responsible = draft.responsible
        self.comment = draft.comment
        self.contacted = draft.contacted
        self.letter = draft.letter
        self.meeting = draft.meeting.to_bool()
        self.successful = draft.successful.to_bool()
        self.priority = draft.priority.value
        self.amount = draft.amount
        self.contact_in_future = draft.contact_in_future.to_bool()
        self.type = draft.type.value if draft.type else None
        self.updated_at = now

    def to_draft(self) -> CollaborationDraft:
        return CollaborationDraft(
            company_id=self.company_id,
            project_id=self.project_id,
            person_id=self.person_id,
            responsible=self.responsible,
            comment=self.comment,
            contacted=bool(self.contacted),
            letter=bool(self.letter),
            meeting=TriState.from_bool(self.meeting),
            successful=TriState.from_bool(self.successful),
            priority=Priority(self.priority) if self.priority else Priority.LOW,
            amount=self.amount,
            contact_in_future=TriState.from_bool(self.contact_in_future),
            type=CollaborationType(self.type) if self.type else None,
        )
