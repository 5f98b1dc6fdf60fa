"""
Vector index clients - non-canonical, best-effort mirror of the SQLite record store.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .embeddings import IEmbeddingProvider
from .types import IndexedDocument


class IVectorIndexClient(ABC):
    """Abstract interface for a named-index document store."""

    @abstractmethod
    def store(self, index: str, id: str, doc: Dict[str, Any], non_tensor_fields: Sequence[str]) -> None:
        """Store or replace a document. Fields in non_tensor_fields are not embedded."""
        pass

    @abstractmethod
    def delete(self, index: str, id: str) -> None:
        """Delete a document by id."""
        pass


class NullVectorIndex(IVectorIndexClient):
    """Index client used when vector features are disabled."""

    def store(self, index: str, id: str, doc: Dict[str, Any], non_tensor_fields: Sequence[str]) -> None:
        pass

    def delete(self, index: str, id: str) -> None:
        pass


def tensor_text(tensor_fields: Dict[str, Any]) -> str:
    """Flatten tensor fields into the text that gets embedded."""
    lines = []
    for key in sorted(tensor_fields):
        value = tensor_fields[key]
        if value is None:
            continue
        if not isinstance(value, str):
            value = json.dumps(value, sort_keys=True)
        lines.append(f"{key}: {value}")
    return "\n".join(lines)


class InMemoryVectorIndex(IVectorIndexClient):
    """Process-local index keeping one normalized vector per document."""

    def __init__(self, embedding_provider: IEmbeddingProvider):
        self.embedding_provider = embedding_provider
        self._indexes: Dict[str, Dict[str, IndexedDocument]] = {}

    def store(self, index: str, id: str, doc: Dict[str, Any], non_tensor_fields: Sequence[str]) -> None:
        non_tensor = set(non_tensor_fields)
        tensor_fields = {k: v for k, v in doc.items() if k not in non_tensor}
        metadata = {k: v for k, v in doc.items() if k in non_tensor}

        text = tensor_text(tensor_fields)
        vector = None
        if text:
            vector = np.asarray(self.embedding_provider.embed_text(text), dtype=np.float32)
            norm = np.linalg.norm(vector)
            if norm > 0:
                vector = vector / norm

        # Same id replaces the previous document
        self._indexes.setdefault(index, {})[id] = IndexedDocument(
            id=id,
            vector=vector,
            tensor_fields=tensor_fields,
            metadata=metadata,
        )

    def delete(self, index: str, id: str) -> None:
        self._indexes.get(index, {}).pop(id, None)

    def get(self, index: str, id: str) -> Optional[IndexedDocument]:
        return self._indexes.get(index, {}).get(id)

    def ids(self, index: str) -> List[str]:
        return list(self._indexes.get(index, {}))

    def count(self, index: str) -> int:
        return len(self._indexes.get(index, {}))

    def clear(self, index: str) -> None:
        self._indexes.pop(index, None)
