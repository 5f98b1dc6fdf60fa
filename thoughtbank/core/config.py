"""
Thought store configuration.
SQLite is the canonical record store; the vector index is a best-effort mirror.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/thoughts.db")

# Vector index configuration
VECTOR_ENABLED = os.getenv("VECTOR_ENABLED", "true").lower() == "true"
VECTOR_PROVIDER = os.getenv("VECTOR_PROVIDER", "memory")  # memory|marqo
MARQO_URL = os.getenv("MARQO_URL", "http://localhost:8882")
MARQO_TIMEOUT_SEC = float(os.getenv("MARQO_TIMEOUT_SEC", "10"))

# Embeddings used by the in-memory index
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "hash")  # hash|sentence
EMBED_MODEL_NAME = os.getenv("EMBED_MODEL_NAME", "all-MiniLM-L6-v2")
EMBED_DIMENSION = int(os.getenv("EMBED_DIMENSION", "384"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

VERSION = "0.1.0"


def get_db_path() -> str:
    """Database path, read at call time so tests can point it elsewhere."""
    return os.getenv("DB_PATH", DB_PATH)


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def are_vector_features_enabled():
    """Check if vector features are enabled."""
    return os.getenv("VECTOR_ENABLED", "true").lower() == "true"


def get_vector_provider():
    return os.getenv("VECTOR_PROVIDER", VECTOR_PROVIDER)


def get_marqo_timeout() -> float:
    return float(os.getenv("MARQO_TIMEOUT_SEC", str(MARQO_TIMEOUT_SEC)))


def get_embed_dimension() -> int:
    return int(os.getenv("EMBED_DIMENSION", str(EMBED_DIMENSION)))


def get_embedding_provider():
    """Get configured embedding provider implementation."""
    provider = os.getenv("EMBED_PROVIDER", EMBED_PROVIDER)

    if provider == "sentence":
        from thoughtbank.vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(os.getenv("EMBED_MODEL_NAME", EMBED_MODEL_NAME))

    from thoughtbank.vector.embeddings import DeterministicHashEmbedding
    return DeterministicHashEmbedding(dimension=get_embed_dimension())


def get_vector_index_client():
    """Get the configured vector index client.

    Returns a no-op client when vector features are disabled so callers never
    need to branch on configuration.
    """
    from thoughtbank.vector import index

    if not are_vector_features_enabled():
        return index.NullVectorIndex()

    provider = get_vector_provider()
    if provider == "marqo":
        from thoughtbank.vector.marqo_client import MarqoIndexClient
        return MarqoIndexClient(
            url=os.getenv("MARQO_URL", MARQO_URL),
            timeout=get_marqo_timeout(),
        )

    return index.InMemoryVectorIndex(get_embedding_provider())


def validate_config():
    """Validate vector configuration and return any issues."""
    issues = []

    provider = get_vector_provider()
    if provider not in ["memory", "marqo"]:
        issues.append(f"Invalid VECTOR_PROVIDER: {provider}")

    embed_provider = os.getenv("EMBED_PROVIDER", EMBED_PROVIDER)
    if embed_provider not in ["hash", "sentence"]:
        issues.append(f"Invalid EMBED_PROVIDER: {embed_provider}")

    if provider == "marqo" and not os.getenv("MARQO_URL", MARQO_URL).startswith(("http://", "https://")):
        issues.append("MARQO_URL must start with http:// or https://")

    try:
        if get_marqo_timeout() <= 0:
            issues.append("MARQO_TIMEOUT_SEC must be > 0")
    except ValueError:
        issues.append(f"Invalid MARQO_TIMEOUT_SEC: {os.getenv('MARQO_TIMEOUT_SEC')}")

    try:
        if get_embed_dimension() < 1:
            issues.append("EMBED_DIMENSION must be >= 1")
    except ValueError:
        issues.append(f"Invalid EMBED_DIMENSION: {os.getenv('EMBED_DIMENSION')}")

    return issues
