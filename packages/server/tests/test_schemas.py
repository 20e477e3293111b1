"""
Unit tests for the shared collaboration schemas.

Tests cover:
- TriState conversion to and from nullable booleans
- Wire coercion of tri-state fields
- Request validation (responsible, priority, type, amount)
- Copy flag defaults
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cdb_shared.schemas.collaborations import (
    BulkCollaborationCreate,
    CollaborationCreate,
    CollaborationRead,
    CopyFlags,
)
from cdb_shared.schemas.common import CollaborationType, Priority, TriState


# ---------------------------------------------------------------------------
# TriState
# ---------------------------------------------------------------------------


class TestTriState:
    def test_from_bool(self):
        assert TriState.from_bool(None) is TriState.UNKNOWN
        assert TriState.from_bool(True) is TriState.TRUE
        assert TriState.from_bool(False) is TriState.FALSE

    def test_to_bool(self):
        assert TriState.UNKNOWN.to_bool() is None
        assert TriState.TRUE.to_bool() is True
        assert TriState.FALSE.to_bool() is False

    def test_unknown_is_not_false(self):
        assert TriState.UNKNOWN != TriState.FALSE
        assert TriState.UNKNOWN.to_bool() is not False


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


def _create_payload(**overrides):
    payload = {
        "company_id": 1,
        "project_id": 10,
        "responsible": "Jane Doe",
        "priority": "High",
    }
    payload.update(overrides)
    return payload


class TestCollaborationCreate:
    def test_minimal_payload_defaults(self):
        req = CollaborationCreate(**_create_payload())
        assert req.priority is Priority.HIGH
        assert req.contacted is False
        assert req.letter is False
        assert req.meeting is TriState.UNKNOWN
        assert req.successful is TriState.UNKNOWN
        assert req.contact_in_future is TriState.UNKNOWN
        assert req.type is None

    def test_nullable_bool_wire_format(self):
        req = CollaborationCreate(
            **_create_payload(meeting=True, successful=False, contact_in_future=None)
        )
        assert req.meeting is TriState.TRUE
        assert req.successful is TriState.FALSE
        assert req.contact_in_future is TriState.UNKNOWN

    def test_enum_value_accepted_for_tristate(self):
        req = CollaborationCreate(**_create_payload(successful="unknown"))
        assert req.successful is TriState.UNKNOWN

    def test_responsible_required(self):
        with pytest.raises(ValidationError):
            CollaborationCreate(**_create_payload(responsible=""))

    def test_priority_must_be_known(self):
        with pytest.raises(ValidationError):
            CollaborationCreate(**_create_payload(priority="Urgent"))

    def test_type_enum(self):
        req = CollaborationCreate(**_create_payload(type="Material"))
        assert req.type is CollaborationType.MATERIAL
        with pytest.raises(ValidationError):
            CollaborationCreate(**_create_payload(type="Political"))

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            CollaborationCreate(**_create_payload(amount=0))

    def test_bulk_allows_empty_company_list_at_schema_level(self):
        # Emptiness is reported by the service as EMPTY_CANDIDATE_SET.
        req = BulkCollaborationCreate(project_id=10, priority="Low")
        assert req.company_ids == []
        assert req.responsible is None


class TestCollaborationRead:
    def test_tristate_serializes_as_nullable_bool(self):
        read = CollaborationRead(
            id=1,
            company_id=1,
            project_id=10,
            contacted=True,
            letter=False,
            meeting=TriState.UNKNOWN,
            successful=TriState.TRUE,
            priority=Priority.LOW,
            contact_in_future=TriState.FALSE,
        )
        data = read.model_dump(mode="json")
        assert data["meeting"] is None
        assert data["successful"] is True
        assert data["contact_in_future"] is False
        assert data["priority"] == "Low"


class TestCopyFlags:
    def test_defaults(self):
        flags = CopyFlags()
        assert flags.copy_contact_person
        assert flags.copy_type
        assert flags.copy_priority
        assert flags.copy_contact_in_future
        assert not flags.copy_responsible
        assert not flags.copy_comment
        assert not flags.copy_progress
        assert not flags.copy_status
        assert not flags.copy_amount
