"""
Records held by the in-memory vector index.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np


@dataclass
class IndexedDocument:
    """A document as stored in one index."""

    id: str
    """Document id, equal to the thought id"""

    vector: Optional[np.ndarray]
    """Normalized embedding of the tensor fields"""

    tensor_fields: Dict[str, Any]
    """Fields that were embedded"""

    metadata: Dict[str, Any]
    """Non-tensor fields kept for exact-match filtering"""
