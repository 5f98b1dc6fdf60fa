"""
Exception hierarchy for the thought store.

Validation and subject resolution errors reach the caller. VectorIndexError is
raised by index clients and handled by ThoughtService, which logs it and keeps
the record store operation.
"""

from typing import Any, Dict, List


class ThoughtbankError(Exception):
    """Base class for thought store errors."""


class ThoughtValidationError(ThoughtbankError):
    """Creation or update parameters failed validation."""

    def __init__(self, message: str, errors: List[Dict[str, Any]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc) -> "ThoughtValidationError":
        errors = exc.errors()
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) or "params" for e in errors)
        return cls(f"Invalid thought parameters: {fields}", errors)


class SubjectResolutionError(ThoughtbankError):
    """Subject kind unknown or subject could not be created."""


class ThoughtNotFoundError(ThoughtbankError):
    """No thought with the given id exists."""

    def __init__(self, thought_id: str):
        super().__init__(f"Thought {thought_id} not found")
        self.thought_id = thought_id


class VectorIndexError(ThoughtbankError):
    """The vector index rejected or failed a request."""


class CorruptThoughtError(ThoughtbankError):
    """A stored thought row carries a kind or subject type this code does not know."""

    def __init__(self, thought_id: str, detail: str):
        super().__init__(f"Thought {thought_id} has an unreadable row: {detail}")
        self.thought_id = thought_id
