from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, PlainSerializer


class TriState(str, Enum):
    """A three-valued flag where "not yet determined" is distinct from False."""

    UNKNOWN = "unknown"
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> "TriState":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def to_bool(self) -> Optional[bool]:
        if self is TriState.UNKNOWN:
            return None
        return self is TriState.TRUE


def _coerce_tristate(value: Any) -> Any:
    # Wire format is a nullable boolean; enum names are accepted as well.
    if value is None or isinstance(value, bool):
        return TriState.from_bool(value)
    return value


TriStateBool = Annotated[
    TriState,
    BeforeValidator(_coerce_tristate),
    PlainSerializer(lambda v: v.to_bool(), return_type=Optional[bool]),
]


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class CollaborationType(str, Enum):
    FINANCIAL = "Financial"
    MATERIAL = "Material"
    EDUCATIONAL = "Educational"


class UserRole(str, Enum):
    ADMINISTRATOR = "Administrator"
    PROJECT_RESPONSIBLE = "Project responsible"
    PROJECT_TEAM_MEMBER = "Project team member"
    OBSERVER = "Observer"
