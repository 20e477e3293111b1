"""
Unit tests for copy-flag field mapping.

Tests cover:
- Every flag on: the copy equals the source apart from the project
- Every flag off: every gated field takes its neutral default
- Each flag gates exactly its own fields
- The flag/field table covers the draft exhaustively
"""

from __future__ import annotations

import pytest

from app.models.collaboration import CollaborationDraft
from app.services.copy_flags import (
    ALWAYS_COPIED,
    COPY_FLAG_FIELDS,
    NEUTRAL_DEFAULTS,
    apply_copy_flags,
)
from cdb_shared.schemas.collaborations import CopyFlags
from cdb_shared.schemas.common import CollaborationType, Priority, TriState

TARGET = 20


def _source() -> CollaborationDraft:
    return CollaborationDraft(
        company_id=1,
        project_id=10,
        person_id=100,
        responsible="Jane Doe",
        comment="Met at the fair",
        contacted=True,
        letter=True,
        meeting=TriState.TRUE,
        successful=TriState.FALSE,
        priority=Priority.HIGH,
        amount=2500.0,
        contact_in_future=TriState.TRUE,
        type=CollaborationType.FINANCIAL,
    )


def _flags(value: bool) -> CopyFlags:
    return CopyFlags(**{name: value for name in CopyFlags.model_fields})


class TestApplyCopyFlags:
    def test_all_flags_on_copies_everything(self):
        source = _source()
        copied = apply_copy_flags(source, _flags(True), TARGET)
        assert copied.project_id == TARGET
        assert copied.model_dump(exclude={"project_id"}) == source.model_dump(exclude={"project_id"})

    def test_all_flags_off_uses_neutral_defaults(self):
        copied = apply_copy_flags(_source(), _flags(False), TARGET)
        assert copied.company_id == 1
        assert copied.project_id == TARGET
        assert copied.person_id is None
        assert copied.responsible is None
        assert copied.comment is None
        assert copied.contacted is False
        assert copied.letter is False
        assert copied.meeting is TriState.UNKNOWN
        assert copied.successful is TriState.UNKNOWN
        assert copied.priority is Priority.LOW
        assert copied.amount is None
        assert copied.contact_in_future is TriState.UNKNOWN
        assert copied.type is None

    @pytest.mark.parametrize("flag", sorted(COPY_FLAG_FIELDS))
    def test_single_flag_gates_only_its_fields(self, flag):
        source = _source()
        flags = _flags(False).model_copy(update={flag: True})
        copied = apply_copy_flags(source, flags, TARGET)
        for other_flag, fields in COPY_FLAG_FIELDS.items():
            for field in fields:
                expected = getattr(source, field) if other_flag == flag else NEUTRAL_DEFAULTS[field]
                assert getattr(copied, field) == expected, (flag, field)

    def test_progress_flag_covers_contacted_letter_meeting(self):
        flags = _flags(False).model_copy(update={"copy_progress": True})
        copied = apply_copy_flags(_source(), flags, TARGET)
        assert (copied.contacted, copied.letter, copied.meeting) == (True, True, TriState.TRUE)
        assert copied.successful is TriState.UNKNOWN

    def test_amount_off_drops_amount(self):
        copied = apply_copy_flags(_source(), CopyFlags(copy_amount=False), TARGET)
        assert copied.amount is None

    def test_source_is_not_mutated(self):
        source = _source()
        before = source.model_dump()
        apply_copy_flags(source, _flags(False), TARGET)
        assert source.model_dump() == before


class TestFlagTable:
    def test_every_flag_is_mapped(self):
        assert set(COPY_FLAG_FIELDS) == set(CopyFlags.model_fields)

    def test_every_settable_field_is_gated_once(self):
        gated = [f for fields in COPY_FLAG_FIELDS.values() for f in fields]
        settable = set(CollaborationDraft.model_fields) - {"project_id"} - set(ALWAYS_COPIED)
        assert sorted(gated) == sorted(settable)
        assert set(NEUTRAL_DEFAULTS) == settable
