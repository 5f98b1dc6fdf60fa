"""
Display strings derived from a thought. Nothing here is stored.
"""

from datetime import datetime
from typing import Callable, Dict

from .schema import Thought, ThoughtKind

TIMESTAMP_FORMAT = '%d/%m/%Y %H:%M'


def format_timestamp(ts: datetime) -> str:
    return f"[{ts.strftime(TIMESTAMP_FORMAT)}]"


def _base_brief(thought: Thought) -> str:
    return f"{format_timestamp(thought.created_at)} {thought.brief.strip()}"


def _reflection_brief(thought: Thought) -> str:
    return f"{format_timestamp(thought.created_at)} Reflection: {thought.brief.strip()}"


_BRIEF_FORMATTERS: Dict[ThoughtKind, Callable[[Thought], str]] = {
    ThoughtKind.BASE: _base_brief,
    ThoughtKind.REFLECTION: _reflection_brief,
}


def brief_with_timestamp(thought: Thought) -> str:
    """Brief prefixed with its creation time, e.g. "[05/03/2024 14:07] brief."."""
    return _BRIEF_FORMATTERS[thought.kind](thought)
