"""
Duplicate detection for (company, project) pairings.

A project may hold at most one collaboration per company. Every create path
runs the detector first so it can report colliding companies by name; the
unique constraint on the table remains the authoritative check.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import EmptyCandidateSetError, NotFoundError
from app.models.collaboration import Collaboration
from app.models.company import Company
from cdb_shared.schemas.collaborations import DuplicateCheck

log = structlog.get_logger()

UNKNOWN_COMPANY_NAME = "Unknown"


def unique_ids(ids: Iterable[int]) -> list[int]:
    """De-duplicate ids, keeping first-occurrence order."""
    return list(dict.fromkeys(ids))


async def detect_duplicates(
    session: AsyncSession,
    project_id: int,
    company_ids: Iterable[int],
    *,
    exclude_id: Optional[int] = None,
) -> DuplicateCheck:
    """Partition candidate companies into those new to the project and those already paired.

    ``exclude_id`` ignores one collaboration row (the row being updated).
    """
    candidates = unique_ids(company_ids)
    if not candidates:
        raise EmptyCandidateSetError("At least one company is required")

    result = await session.execute(
        select(Company.id, Company.name).where(Company.id.in_(candidates))
    )
    names = {row.id: row.name for row in result.all()}
    missing = [cid for cid in candidates if cid not in names]
    if missing:
        raise NotFoundError(
            f"Companies not found: {', '.join(str(cid) for cid in missing)}",
            missing_company_ids=missing,
        )

    stmt = select(Collaboration.company_id).where(
        Collaboration.project_id == project_id,
        Collaboration.company_id.in_(candidates),
    )
    if exclude_id is not None:
        stmt = stmt.where(Collaboration.id != exclude_id)
    existing = set((await session.execute(stmt)).scalars().all())

    check = DuplicateCheck(
        project_id=project_id,
        new_company_ids=[cid for cid in candidates if cid not in existing],
        existing_company_ids=[cid for cid in candidates if cid in existing],
    )
    check.existing_company_names = [
        names[cid] or UNKNOWN_COMPANY_NAME for cid in check.existing_company_ids
    ]
    log.debug(
        "duplicates.checked",
        project_id=project_id,
        candidates=len(candidates),
        existing=len(check.existing_company_ids),
    )
    return check
