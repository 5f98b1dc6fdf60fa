"""
Typed records for thoughts and their subjects.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union


class ThoughtKind(Enum):
    """Tagged thought variants stored in the `type` column."""
    BASE = None
    REFLECTION = "Reflection"

    @classmethod
    def from_type(cls, type_name: Optional[str]) -> "ThoughtKind":
        try:
            return cls(type_name)
        except ValueError:
            raise ValueError(f"Unknown thought type: {type_name!r}")


class SubjectKind(Enum):
    """Subject kinds a thought can be about, keyed by `subject_type`."""
    PROJECT = "Project"
    PERSON = "Person"

    @property
    def table(self) -> str:
        return _SUBJECT_TABLES[self]


_SUBJECT_TABLES = {
    SubjectKind.PROJECT: "projects",
    SubjectKind.PERSON: "people",
}


@dataclass(frozen=True)
class SubjectRef:
    """Reference from a thought to one subject."""
    kind: SubjectKind
    id: str

    @property
    def subject_type(self) -> str:
        return self.kind.value

    @property
    def subject_id(self) -> str:
        return self.id


@dataclass
class ProjectSubject:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    kind: SubjectKind = field(default=SubjectKind.PROJECT, init=False)

    def ref(self) -> SubjectRef:
        return SubjectRef(self.kind, self.id)


@dataclass
class PersonSubject:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    kind: SubjectKind = field(default=SubjectKind.PERSON, init=False)

    def ref(self) -> SubjectRef:
        return SubjectRef(self.kind, self.id)


Subject = Union[ProjectSubject, PersonSubject]

SUBJECT_CLASSES = {
    SubjectKind.PROJECT: ProjectSubject,
    SubjectKind.PERSON: PersonSubject,
}


@dataclass
class Thought:
    id: str
    brief: str
    content: Dict[str, Any]
    bot_id: str
    created_at: datetime
    updated_at: datetime
    importance: int = 50
    kind: ThoughtKind = ThoughtKind.BASE
    subject: Optional[SubjectRef] = None

    @property
    def type(self) -> Optional[str]:
        return self.kind.value

    @property
    def subject_type(self) -> Optional[str]:
        return self.subject.subject_type if self.subject else None

    @property
    def subject_id(self) -> Optional[str]:
        return self.subject.subject_id if self.subject else None


@dataclass
class Bot:
    id: str
    name: str
    created_at: datetime
