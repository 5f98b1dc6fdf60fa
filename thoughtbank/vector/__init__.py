"""
Vector index overlay - non-canonical, best-effort mirror of SQLite canonical truth.
"""

# Package initialization for vector module
from .index import IVectorIndexClient, InMemoryVectorIndex, NullVectorIndex
from .marqo_client import MarqoIndexClient
from .types import IndexedDocument
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding
from .projector import NON_TENSOR_FIELDS, project_document

__all__ = [
    'IVectorIndexClient',
    'InMemoryVectorIndex',
    'NullVectorIndex',
    'MarqoIndexClient',
    'IndexedDocument',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'NON_TENSOR_FIELDS',
    'project_document',
]
