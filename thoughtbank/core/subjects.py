"""
Subject resolution for thoughts.

A thought may be about a subject (a Project, a Person). Callers name the kind
with `subject_type` and either point at an existing subject by id or give a
human-readable name, in which case the subject is found or created.

Subject creation commits on its own, before the thought row is written. If the
thought insert then fails, the new subject stays behind.
"""

import sqlite3
from typing import Callable, Dict, Optional, Tuple

from . import dao
from .errors import SubjectResolutionError
from .schema import Subject, SubjectKind, SubjectRef

SubjectFinder = Callable[[SubjectKind, str], Tuple[Subject, bool]]


class SubjectResolver:
    """Resolves creation parameters to a SubjectRef, keyed by subject kind."""

    def __init__(self, finders: Dict[SubjectKind, SubjectFinder] = None):
        if finders is None:
            finders = {kind: dao.find_or_create_subject for kind in SubjectKind}
        self.finders = finders

    def kind_for(self, subject_type: str) -> SubjectKind:
        try:
            kind = SubjectKind(subject_type)
        except ValueError:
            raise SubjectResolutionError(f"Unknown subject type: {subject_type!r}")
        if kind not in self.finders:
            raise SubjectResolutionError(f"No resolver registered for subject type: {subject_type!r}")
        return kind

    def resolve(self, subject_type: Optional[str], subject_id: Optional[str] = None,
                subject_name: Optional[str] = None) -> Optional[SubjectRef]:
        """Return the subject reference to store on a thought, or None."""
        if subject_type is None:
            return None

        kind = self.kind_for(subject_type)

        # An explicit id is taken as-is; existence is the subject store's concern
        if subject_id is not None:
            return SubjectRef(kind, subject_id)

        if subject_name is None:
            raise SubjectResolutionError(f"{subject_type} subject needs an id or a name")

        try:
            subject, _ = self.finders[kind](kind, subject_name.strip())
        except sqlite3.Error as e:
            raise SubjectResolutionError(f"Failed to create {subject_type} {subject_name!r}: {e}") from e
        return subject.ref()
