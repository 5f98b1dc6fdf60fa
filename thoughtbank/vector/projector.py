"""
Shapes a thought into the document the vector index stores.

The record attributes are applied after `content`, so a content key named like
an attribute (say "importance") never hides the real attribute.
"""

from typing import Any, Dict, List, Tuple

from thoughtbank.core.schema import Thought

# Exact-match metadata; everything else in the document is embedded
NON_TENSOR_FIELDS = ["type", "bot_id", "subject_id", "subject_type", "importance"]

PROJECTED_ATTRIBUTES = ["type", "brief", "bot_id", "subject_id", "subject_type", "importance"]


def project_attributes(thought: Thought) -> Dict[str, Any]:
    return {name: getattr(thought, name) for name in PROJECTED_ATTRIBUTES}


def project_document(thought: Thought) -> Tuple[Dict[str, Any], List[str]]:
    """Return (document, non_tensor_fields) for `thought`."""
    doc = dict(thought.content)
    doc.update(project_attributes(thought))
    return doc, list(NON_TENSOR_FIELDS)
