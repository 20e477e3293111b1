"""
Collaboration service layer: single-record CRUD and joined reads.

Handles:
- Create / update / delete of one collaboration with the per-project
  company uniqueness rule applied on every write
- Contact ownership check (a contact must belong to the collaboration's company)
- Batched joined reads (company, project, contact names, responsible user)
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import select

from app.core.errors import (
    AllDuplicatesError,
    ConflictError,
    ContactMismatchError,
    NotFoundError,
    PersistenceError,
)
from app.models.app_user import AppUser
from app.models.base import utcnow
from app.models.collaboration import PAIR_CONSTRAINT, Collaboration, CollaborationDraft
from app.models.company import Company
from app.models.contact import Contact
from app.models.project import Project
from app.services.duplicates import detect_duplicates
from cdb_shared.schemas.collaborations import (
    CollaborationAttributes,
    CollaborationCreate,
    CollaborationRead,
    CollaborationUpdate,
)

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def get_collaboration_or_404(session: AsyncSession, collaboration_id: int) -> Collaboration:
    collaboration = await session.get(Collaboration, collaboration_id)
    if not collaboration:
        raise NotFoundError("Collaboration not found")
    return collaboration


async def get_project_or_404(session: AsyncSession, project_id: int) -> Project:
    project = await session.get(Project, project_id)
    if not project:
        raise NotFoundError(f"Project {project_id} not found")
    return project


async def get_contact_or_404(session: AsyncSession, contact_id: int) -> Contact:
    contact = await session.get(Contact, contact_id)
    if not contact:
        raise NotFoundError(f"Contact {contact_id} not found")
    return contact


async def check_contact_company(session: AsyncSession, contact_id: int, company_id: int) -> None:
    contact = await get_contact_or_404(session, contact_id)
    if contact.company_id != company_id:
        raise ContactMismatchError(
            "The selected contact does not belong to the collaboration's company",
            contact_id=contact_id,
            company_id=company_id,
        )


def build_draft(
    attrs: CollaborationAttributes,
    company_id: int,
    project_id: int,
    person_id: Optional[int] = None,
) -> CollaborationDraft:
    """Turn a request payload into a draft; blank text fields become None."""
    return CollaborationDraft(
        company_id=company_id,
        project_id=project_id,
        person_id=person_id,
        responsible=(attrs.responsible or "").strip() or None,
        comment=attrs.comment or None,
        contacted=attrs.contacted,
        letter=attrs.letter,
        meeting=attrs.meeting,
        successful=attrs.successful,
        priority=attrs.priority,
        amount=attrs.amount,
        contact_in_future=attrs.contact_in_future,
        type=attrs.type,
    )


def _violates_pair_constraint(exc: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite lists the constrained columns.
    message = str(exc.orig)
    return (
        PAIR_CONSTRAINT in message
        or "collaborations.company_id, collaborations.project_id" in message
    )


async def flush_or_raise(session: AsyncSession, action: str) -> None:
    """Flush pending writes, mapping storage failures onto the error taxonomy.

    A violation of the (company, project) unique constraint means another
    request created the same pair after our duplicate check. A foreign key
    violation means a referenced row was deleted after it was looked up.
    Either way nothing is written.
    """
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        if _violates_pair_constraint(exc):
            log.warning("collaborations.conflict", action=action, error=str(exc.orig))
            raise ConflictError(
                "A collaboration for one of these companies already exists on this project"
            ) from exc
        if "foreign key" in str(exc.orig).lower():
            log.warning("collaborations.missing_reference", action=action, error=str(exc.orig))
            raise NotFoundError(
                "A referenced company, project or contact no longer exists"
            ) from exc
        log.exception("collaborations.integrity_error", action=action)
        raise PersistenceError(f"Failed to {action}") from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        log.exception("collaborations.persistence_error", action=action)
        raise PersistenceError(f"Failed to {action}") from exc


# ---------------------------------------------------------------------------
# Joined reads
# ---------------------------------------------------------------------------


def _joined_select():
    others = aliased(Collaboration)
    responsible_user_id = (
        select(AppUser.id)
        .where(func.lower(func.trim(AppUser.full_name)) == func.lower(func.trim(Collaboration.responsible)))
        .limit(1)
        .scalar_subquery()
    )
    # Any collaboration of the same company flagged "do not contact in future"
    do_not_contact = (
        select(others.id)
        .where(
            others.company_id == Collaboration.company_id,
            others.contact_in_future.is_(False),
        )
        .exists()
    )
    return (
        select(
            Collaboration,
            Company.name.label("company_name"),
            Project.name.label("project_name"),
            Contact.name.label("contact_name"),
            responsible_user_id.label("responsible_user_id"),
            do_not_contact.label("company_has_do_not_contact"),
        )
        .outerjoin(Company, Company.id == Collaboration.company_id)
        .outerjoin(Project, Project.id == Collaboration.project_id)
        .outerjoin(Contact, Contact.id == Collaboration.person_id)
    )


def _to_read(row) -> CollaborationRead:
    collaboration: Collaboration = row[0]
    draft = collaboration.to_draft()
    return CollaborationRead(
        **draft.model_dump(exclude={"person_id"}),
        id=collaboration.id,
        contact_id=draft.person_id,
        created_at=collaboration.created_at,
        updated_at=collaboration.updated_at,
        company_name=row.company_name,
        project_name=row.project_name,
        contact_name=row.contact_name,
        responsible_user_id=row.responsible_user_id,
        company_has_do_not_contact=bool(row.company_has_do_not_contact),
    )


async def fetch_collaborations(
    session: AsyncSession, collaboration_ids: Sequence[int]
) -> list[CollaborationRead]:
    """Joined view for a set of ids in one query, returned in the given order."""
    if not collaboration_ids:
        return []
    result = await session.execute(
        _joined_select().where(Collaboration.id.in_(collaboration_ids))
    )
    by_id = {row[0].id: _to_read(row) for row in result.all()}
    return [by_id[cid] for cid in collaboration_ids if cid in by_id]


async def read_collaboration(session: AsyncSession, collaboration_id: int) -> CollaborationRead:
    found = await fetch_collaborations(session, [collaboration_id])
    if not found:
        raise NotFoundError("Collaboration not found")
    return found[0]


async def list_collaborations(
    session: AsyncSession,
    project_id: Optional[int] = None,
    company_id: Optional[int] = None,
) -> list[CollaborationRead]:
    stmt = _joined_select()
    if project_id is not None:
        stmt = stmt.where(Collaboration.project_id == project_id)
    if company_id is not None:
        stmt = stmt.where(Collaboration.company_id == company_id)
    stmt = stmt.order_by(Collaboration.updated_at.desc(), Collaboration.created_at.desc())
    result = await session.execute(stmt)
    return [_to_read(row) for row in result.all()]


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def _ensure_pair_is_free(
    session: AsyncSession,
    company_id: int,
    project_id: int,
    exclude_id: Optional[int] = None,
) -> None:
    await get_project_or_404(session, project_id)
    check = await detect_duplicates(session, project_id, [company_id], exclude_id=exclude_id)
    if check.existing_company_ids:
        raise AllDuplicatesError(
            "This company already has a collaboration for this project",
            existing_companies=check.existing_company_names,
        )


async def create_collaboration(session: AsyncSession, data: CollaborationCreate) -> Collaboration:
    await _ensure_pair_is_free(session, data.company_id, data.project_id)
    if data.contact_id:
        await check_contact_company(session, data.contact_id, data.company_id)

    draft = build_draft(data, data.company_id, data.project_id, data.contact_id)
    collaboration = Collaboration.from_draft(draft, utcnow())
    session.add(collaboration)
    await flush_or_raise(session, "create collaboration")

    log.info(
        "collaboration.created",
        collaboration_id=collaboration.id,
        company_id=collaboration.company_id,
        project_id=collaboration.project_id,
    )
    return collaboration


async def update_collaboration(
    session: AsyncSession,
    collaboration_id: int,
    data: CollaborationUpdate,
) -> Collaboration:
    collaboration = await get_collaboration_or_404(session, collaboration_id)

    pair_changed = (data.company_id, data.project_id) != (
        collaboration.company_id,
        collaboration.project_id,
    )
    if pair_changed:
        await _ensure_pair_is_free(
            session, data.company_id, data.project_id, exclude_id=collaboration.id
        )
    if data.contact_id:
        await check_contact_company(session, data.contact_id, data.company_id)

    draft = build_draft(data, data.company_id, data.project_id, data.contact_id)
    collaboration.apply_draft(draft, utcnow())
    session.add(collaboration)
    await flush_or_raise(session, "update collaboration")

    log.info("collaboration.updated", collaboration_id=collaboration.id, pair_changed=pair_changed)
    return collaboration


async def delete_collaboration(session: AsyncSession, collaboration_id: int) -> None:
    collaboration = await get_collaboration_or_404(session, collaboration_id)
    await session.delete(collaboration)
    await flush_or_raise(session, "delete collaboration")
    log.info("collaboration.deleted", collaboration_id=collaboration_id)
