"""Collaboration schemas shared by the server and frontend codegen."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import CollaborationType, Priority, TriState, TriStateBool


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

class CollaborationAttributes(BaseModel):
    """Fields shared by every create path (everything except the company/project pair)."""
    contact_id: Optional[int] = Field(default=None, gt=0)
    responsible: Optional[str] = None
    comment: Optional[str] = None
    contacted: bool = False
    letter: bool = False
    meeting: TriStateBool = TriState.UNKNOWN
    successful: TriStateBool = TriState.UNKNOWN
    priority: Priority
    amount: Optional[float] = Field(default=None, gt=0)
    contact_in_future: TriStateBool = TriState.UNKNOWN
    type: Optional[CollaborationType] = None


class CollaborationCreate(CollaborationAttributes):
    company_id: int = Field(gt=0)
    project_id: int = Field(gt=0)
    responsible: str = Field(min_length=1)


class CollaborationUpdate(CollaborationCreate):
    """Full replacement of every settable field (PUT semantics)."""


class CollaborationRead(BaseModel):
    id: int
    company_id: int
    project_id: int
    contact_id: Optional[int] = None
    responsible: Optional[str] = None
    comment: Optional[str] = None
    contacted: bool
    letter: bool
    meeting: TriStateBool
    successful: TriStateBool
    priority: Priority
    amount: Optional[float] = None
    contact_in_future: TriStateBool
    type: Optional[CollaborationType] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Joined display data
    company_name: Optional[str] = None
    project_name: Optional[str] = None
    contact_name: Optional[str] = None
    responsible_user_id: Optional[str] = None
    company_has_do_not_contact: bool = False


# ---------------------------------------------------------------------------
# Duplicate detection
# ---------------------------------------------------------------------------

class DuplicateCheck(BaseModel):
    project_id: int
    new_company_ids: List[int] = Field(default_factory=list)
    existing_company_ids: List[int] = Field(default_factory=list)
    existing_company_names: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Bulk create
# ---------------------------------------------------------------------------

class BulkCollaborationCreate(CollaborationAttributes):
    """Request body for POST /collaborations/bulk."""
    company_ids: List[int] = Field(default_factory=list)
    project_id: int = Field(gt=0)


class BulkCollaborationResult(BaseModel):
    created: List[CollaborationRead]
    skipped_companies: Optional[List[str]] = None
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Copy across projects
# ---------------------------------------------------------------------------

class CopyFlags(BaseModel):
    """Which attributes are carried over when copying; company is always copied."""
    copy_contact_person: bool = True
    copy_type: bool = True
    copy_priority: bool = True
    copy_contact_in_future: bool = True
    copy_responsible: bool = False
    copy_comment: bool = False
    copy_progress: bool = False  # contacted, letter, meeting
    copy_status: bool = False  # successful
    copy_amount: bool = False


class CopyCollaborationRequest(CopyFlags):
    """Request body for POST /collaborations/copy."""
    source_project_id: int = Field(gt=0)
    target_project_id: int = Field(gt=0)
    company_ids: Optional[List[int]] = None


class CopyCollaborationResult(BaseModel):
    created: int
    skipped: int
    source_project_id: int
    target_project_id: int
    message: str
    collaborations: List[CollaborationRead] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Responsible person
# ---------------------------------------------------------------------------

class ResponsibleUser(BaseModel):
    id: str
    full_name: str
    email: str
