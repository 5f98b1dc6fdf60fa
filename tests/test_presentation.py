"""
Timestamp-prefixed briefs.
"""

from datetime import datetime, timezone

from thoughtbank.core.presentation import brief_with_timestamp
from thoughtbank.core.schema import Thought, ThoughtKind


def make_thought(brief, created_at, kind=ThoughtKind.BASE):
    return Thought(
        id="t-1",
        brief=brief,
        content={},
        bot_id="bot-1",
        created_at=created_at,
        updated_at=created_at,
        kind=kind,
    )


def test_concatenates_timestamp_with_brief():
    timestamp = datetime.now(timezone.utc)
    thought = make_thought("  brief.  ", timestamp)

    expected = f"[{timestamp.strftime('%d/%m/%Y %H:%M')}] brief."
    assert brief_with_timestamp(thought) == expected


def test_fixed_timestamp_format():
    thought = make_thought("Shipped the release", datetime(2024, 3, 5, 14, 7, 59))
    assert brief_with_timestamp(thought) == "[05/03/2024 14:07] Shipped the release"


def test_internal_whitespace_preserved():
    thought = make_thought("\n  two  words \t", datetime(2023, 12, 31, 0, 0))
    assert brief_with_timestamp(thought) == "[31/12/2023 00:00] two  words"


def test_reflection_kind_is_labelled():
    thought = make_thought(" Looking back. ", datetime(2024, 1, 2, 9, 30), kind=ThoughtKind.REFLECTION)
    assert brief_with_timestamp(thought) == "[02/01/2024 09:30] Reflection: Looking back."


def test_is_derived_not_stored():
    thought = make_thought("first", datetime(2024, 1, 2, 9, 30))
    assert brief_with_timestamp(thought).endswith("first")

    thought.brief = "second"
    assert brief_with_timestamp(thought).endswith("second")
