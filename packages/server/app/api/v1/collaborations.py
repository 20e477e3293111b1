"""
Collaboration endpoints: CRUD, bulk create, copy across projects,
duplicate preview, responsible-person lookups.

- Every create path rejects a second collaboration for the same
  (company, project) pair.
- Bulk create and copy succeed with a skip report when only some companies
  collide, and fail without writing anything when all of them do.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.services.collaborations import (
    create_collaboration,
    delete_collaboration,
    list_collaborations,
    read_collaboration,
    update_collaboration,
)
from app.services.duplicates import detect_duplicates
from app.services.provisioning import bulk_create_collaborations, copy_collaborations
from app.services.responsible import list_responsible_names, resolve_responsible
from cdb_shared.schemas.collaborations import (
    BulkCollaborationCreate,
    BulkCollaborationResult,
    CollaborationCreate,
    CollaborationRead,
    CollaborationUpdate,
    CopyCollaborationRequest,
    CopyCollaborationResult,
    DuplicateCheck,
    ResponsibleUser,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Provisioning
# ---------------------------------------------------------------------------


@router.post("/bulk", response_model=BulkCollaborationResult, status_code=201)
async def bulk_create_endpoint(
    body: BulkCollaborationCreate,
    session: AsyncSession = Depends(get_session),
):
    """Create one collaboration per company for a project, skipping existing pairs."""
    result = await bulk_create_collaborations(session, body)
    await session.commit()
    return result


@router.post("/copy", response_model=CopyCollaborationResult)
async def copy_endpoint(
    body: CopyCollaborationRequest,
    session: AsyncSession = Depends(get_session),
):
    """Copy a project's collaborations into another project."""
    result = await copy_collaborations(session, body)
    await session.commit()
    return result


@router.get("/duplicates", response_model=DuplicateCheck)
async def duplicates_endpoint(
    project_id: int,
    company_ids: List[int] = Query(default=[]),
    session: AsyncSession = Depends(get_session),
):
    """Preview which companies already have a collaboration on the project."""
    return await detect_duplicates(session, project_id, company_ids)


# ---------------------------------------------------------------------------
# Responsible person
# ---------------------------------------------------------------------------


@router.get("/responsible", response_model=List[str])
async def responsible_names_endpoint(session: AsyncSession = Depends(get_session)):
    return await list_responsible_names(session)


@router.get("/responsible/resolve", response_model=Optional[ResponsibleUser])
async def resolve_responsible_endpoint(
    name: str,
    session: AsyncSession = Depends(get_session),
):
    return await resolve_responsible(session, name)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[CollaborationRead])
async def list_endpoint(
    project_id: Optional[int] = None,
    company_id: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
):
    """List collaborations, optionally filtered by project or company."""
    return await list_collaborations(session, project_id=project_id, company_id=company_id)


@router.post("/", response_model=CollaborationRead, status_code=201)
async def create_endpoint(
    body: CollaborationCreate,
    session: AsyncSession = Depends(get_session),
):
    collaboration = await create_collaboration(session, body)
    await session.commit()
    return await read_collaboration(session, collaboration.id)


@router.get("/{collaboration_id}", response_model=CollaborationRead)
async def get_endpoint(
    collaboration_id: int,
    session: AsyncSession = Depends(get_session),
):
    return await read_collaboration(session, collaboration_id)


@router.put("/{collaboration_id}", response_model=CollaborationRead)
async def update_endpoint(
    collaboration_id: int,
    body: CollaborationUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Replace every settable field of a collaboration."""
    collaboration = await update_collaboration(session, collaboration_id, body)
    await session.commit()
    return await read_collaboration(session, collaboration.id)


@router.delete("/{collaboration_id}")
async def delete_endpoint(
    collaboration_id: int,
    session: AsyncSession = Depends(get_session),
):
    await delete_collaboration(session, collaboration_id)
    await session.commit()
    return {"ok": True}
