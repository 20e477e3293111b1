"""
Multi-row collaboration provisioning: bulk create and copy across projects.

Both paths follow the same shape: read existing state, filter out colliding
companies, write the remainder as one batch, then re-read the created rows
with a single joined query. When every candidate collides nothing is written
and an ``AllDuplicatesError`` is raised; partial overlap is a success that
reports what was skipped.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import (
    AllDuplicatesError,
    ContactMismatchError,
    EmptyCandidateSetError,
    SameProjectError,
    SourceEmptyError,
)
from app.models.base import utcnow
from app.models.collaboration import Collaboration
from app.services.collaborations import (
    build_draft,
    fetch_collaborations,
    flush_or_raise,
    get_contact_or_404,
    get_project_or_404,
)
from app.services.copy_flags import apply_copy_flags
from app.services.duplicates import detect_duplicates, unique_ids
from cdb_shared.schemas.collaborations import (
    BulkCollaborationCreate,
    BulkCollaborationResult,
    CopyCollaborationRequest,
    CopyCollaborationResult,
)

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Bulk create
# ---------------------------------------------------------------------------


async def bulk_create_collaborations(
    session: AsyncSession, data: BulkCollaborationCreate
) -> BulkCollaborationResult:
    """Create one collaboration per candidate company, all sharing the payload's fields."""
    candidates = unique_ids(data.company_ids)
    if not candidates:
        raise EmptyCandidateSetError("At least one company is required")

    await get_project_or_404(session, data.project_id)
    check = await detect_duplicates(session, data.project_id, candidates)

    if not check.new_company_ids:
        log.info(
            "collaborations.bulk_all_duplicates",
            project_id=data.project_id,
            candidates=len(candidates),
        )
        raise AllDuplicatesError(
            "All selected companies already have collaborations for this project",
            existing_companies=check.existing_company_names,
        )

    # The contact goes only on the row of the company it belongs to.
    contact_company_id = None
    if data.contact_id:
        contact = await get_contact_or_404(session, data.contact_id)
        if contact.company_id not in candidates:
            raise ContactMismatchError(
                "The selected contact does not belong to any of the selected companies",
                contact_id=data.contact_id,
            )
        contact_company_id = contact.company_id

    now = utcnow()
    rows = [
        Collaboration.from_draft(
            build_draft(
                data,
                company_id,
                data.project_id,
                data.contact_id if company_id == contact_company_id else None,
            ),
            now,
        )
        for company_id in check.new_company_ids
    ]
    session.add_all(rows)
    await flush_or_raise(session, "create bulk collaborations")

    created = await fetch_collaborations(session, [row.id for row in rows])
    result = BulkCollaborationResult(created=created)
    if check.existing_company_ids:
        result.skipped_companies = check.existing_company_names
        result.message = (
            f"Created {len(created)} collaboration(s). Skipped "
            f"{len(check.existing_company_ids)} company(ies) that already had "
            f"collaborations on this project."
        )

    log.info(
        "collaborations.bulk_created",
        project_id=data.project_id,
        created=len(created),
        skipped=len(check.existing_company_ids),
    )
    return result


# ---------------------------------------------------------------------------
# Copy across projects
# ---------------------------------------------------------------------------


async def copy_collaborations(
    session: AsyncSession, req: CopyCollaborationRequest
) -> CopyCollaborationResult:
    """Copy a project's collaborations into another project under the request's copy flags."""
    source_id, target_id = req.source_project_id, req.target_project_id
    if source_id == target_id:
        raise SameProjectError("Source and target projects must be different")

    await get_project_or_404(session, target_id)

    stmt = (
        select(Collaboration)
        .where(Collaboration.project_id == source_id)
        .order_by(Collaboration.id)
    )
    if req.company_ids is not None:
        stmt = stmt.where(Collaboration.company_id.in_(unique_ids(req.company_ids)))
    source_rows = list((await session.execute(stmt)).scalars().all())
    if not source_rows:
        raise SourceEmptyError("No collaborations found in source project")

    # Any collaboration for a company in the target blocks copying that company,
    # whatever its content.
    result = await session.execute(
        select(Collaboration.company_id).where(Collaboration.project_id == target_id)
    )
    taken = set(result.scalars().all())

    to_copy = [row for row in source_rows if row.company_id not in taken]
    skipped = len(source_rows) - len(to_copy)

    if not to_copy:
        log.info(
            "collaborations.copy_all_duplicates",
            source_project_id=source_id,
            target_project_id=target_id,
            skipped=skipped,
        )
        raise AllDuplicatesError(
            "All companies from source project already have collaborations in target project",
            status_code=400,
            skipped=skipped,
        )

    now = utcnow()
    rows = [
        Collaboration.from_draft(apply_copy_flags(src.to_draft(), req, target_id), now)
        for src in to_copy
    ]
    session.add_all(rows)
    await flush_or_raise(session, "copy collaborations")

    created = await fetch_collaborations(session, [row.id for row in rows])
    if skipped:
        message = f"Created {len(created)} collaborations. Skipped {skipped} duplicate companies."
    else:
        message = f"Successfully created {len(created)} collaborations."

    log.info(
        "collaborations.copied",
        source_project_id=source_id,
        target_project_id=target_id,
        created=len(created),
        skipped=skipped,
    )
    return CopyCollaborationResult(
        created=len(created),
        skipped=skipped,
        source_project_id=source_id,
        target_project_id=target_id,
        message=message,
        collaborations=created,
    )
