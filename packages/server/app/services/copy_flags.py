"""
Field-level copy semantics for copying collaborations between projects.

Each copy flag gates a fixed group of fields. A gated field takes the source
value when its flag is on and a neutral default when it is off. The company is
always carried over and the project is always the target.
"""

from __future__ import annotations

from typing import Any

from app.models.collaboration import CollaborationDraft
from cdb_shared.schemas.collaborations import CopyFlags
from cdb_shared.schemas.common import Priority, TriState

ALWAYS_COPIED = ("company_id",)

COPY_FLAG_FIELDS: dict[str, tuple[str, ...]] = {
    "copy_contact_person": ("person_id",),
    "copy_type": ("type",),
    "copy_priority": ("priority",),
    "copy_contact_in_future": ("contact_in_future",),
    "copy_responsible": ("responsible",),
    "copy_comment": ("comment",),
    "copy_progress": ("contacted", "letter", "meeting"),
    "copy_status": ("successful",),
    "copy_amount": ("amount",),
}

NEUTRAL_DEFAULTS: dict[str, Any] = {
    "person_id": None,
    "responsible": None,
    "comment": None,
    "contacted": False,
    "letter": False,
    "meeting": TriState.UNKNOWN,
    "successful": TriState.UNKNOWN,
    "priority": Priority.LOW,
    "amount": None,
    "contact_in_future": TriState.UNKNOWN,
    "type": None,
}


def _check_coverage() -> None:
    """Every flag maps to fields, and every settable field is gated exactly once."""
    if set(COPY_FLAG_FIELDS) != set(CopyFlags.model_fields):
        raise RuntimeError("COPY_FLAG_FIELDS does not match the CopyFlags fields")

    gated = [field for fields in COPY_FLAG_FIELDS.values() for field in fields]
    if len(gated) != len(set(gated)):
        raise RuntimeError("A collaboration field is gated by more than one copy flag")

    settable = set(CollaborationDraft.model_fields) - {"project_id"} - set(ALWAYS_COPIED)
    if set(gated) != settable:
        raise RuntimeError(f"Ungated collaboration fields: {sorted(settable - set(gated))}")
    if set(NEUTRAL_DEFAULTS) != settable:
        raise RuntimeError("NEUTRAL_DEFAULTS must cover exactly the gated fields")


_check_coverage()


def apply_copy_flags(
    source: CollaborationDraft,
    flags: CopyFlags,
    target_project_id: int,
) -> CollaborationDraft:
    values: dict[str, Any] = {field: getattr(source, field) for field in ALWAYS_COPIED}
    values["project_id"] = target_project_id
    for flag, fields in COPY_FLAG_FIELDS.items():
        keep = getattr(flags, flag)
        for field in fields:
            values[field] = getattr(source, field) if keep else NEUTRAL_DEFAULTS[field]
    return CollaborationDraft(**values)
