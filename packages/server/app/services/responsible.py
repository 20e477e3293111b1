"""
Responsible-person lookups.

``responsible`` on a collaboration is free text. Much of it predates user
accounts, so resolving a name to a registered user is best effort and never
part of a write path.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, literal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.app_user import AppUser
from app.models.collaboration import Collaboration
from cdb_shared.schemas.collaborations import ResponsibleUser


async def list_responsible_names(session: AsyncSession) -> list[str]:
    """Distinct non-empty responsible names in use, alphabetically."""
    result = await session.execute(
        select(Collaboration.responsible)
        .where(Collaboration.responsible.is_not(None), Collaboration.responsible != "")
        .distinct()
        .order_by(Collaboration.responsible)
    )
    return list(result.scalars().all())


async def resolve_responsible(
    session: AsyncSession, name: Optional[str]
) -> Optional[ResponsibleUser]:
    """Find the user whose full name matches (trimmed, case-insensitive), if any.

    Both sides are folded by the database, the same way the joined collaboration
    read links a responsible name to a user.
    """
    if not name or not name.strip():
        return None
    result = await session.execute(
        select(AppUser)
        .where(func.lower(func.trim(AppUser.full_name)) == func.lower(func.trim(literal(name))))
        .order_by(AppUser.created_at)
        .limit(1)
    )
    user = result.scalars().first()
    if not user:
        return None
    return ResponsibleUser(id=user.id, full_name=user.full_name, email=user.email)
