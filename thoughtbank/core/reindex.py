#!/usr/bin/env python3
"""
Index Rebuild Utility
Re-stores every thought from the canonical SQLite store into the vector index,
repairing documents that were missed when an index write failed.
"""

import argparse
import sys
from typing import Dict

from .config import are_vector_features_enabled, get_vector_index_client, validate_config
from .db import init_db
from .thoughts import ThoughtService
from thoughtbank.util.logging import logger


def rebuild_thought_index(service: ThoughtService, bot_id: str = None, clear: bool = False) -> Dict[str, int]:
    """Store every persisted thought again. Returns counts of stored and failed documents."""
    index_client = service.index_client

    if clear:
        clear_index = getattr(index_client, "clear", None)
        if clear_index is None:
            logger.warning(f"{index_client.__class__.__name__} cannot be cleared, re-storing only")
        else:
            clear_index(service.index_name)

    thoughts = service.list_thoughts(bot_id)
    stored = 0
    failed = 0
    for thought in thoughts:
        if service.store_vector(thought):
            stored += 1
        else:
            failed += 1

    logger.log_operation("vector.rebuild", "success" if failed == 0 else "partial", {
        "index": service.index_name,
        "total": len(thoughts),
        "stored": stored,
        "failed": failed,
    })
    return {"total": len(thoughts), "stored": stored, "failed": failed}


def main(argv=None):
    """Rebuild the thought vector index from SQLite."""
    parser = argparse.ArgumentParser(description="Rebuild the thought vector index from the record store")
    parser.add_argument("--bot-id", help="Only re-store thoughts of this bot")
    parser.add_argument("--clear", action="store_true", help="Clear the index first when the client supports it")
    args = parser.parse_args(argv)

    if not are_vector_features_enabled():
        print("ERROR: Vector features disabled. Set VECTOR_ENABLED=true")
        sys.exit(1)

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}")
        sys.exit(1)

    init_db()

    print("Starting vector index rebuild...")
    service = ThoughtService(get_vector_index_client())
    result = rebuild_thought_index(service, bot_id=args.bot_id, clear=args.clear)

    print(f"Found {result['total']} thoughts in canonical store")
    print(f"✓ Stored {result['stored']} documents")
    if result["failed"]:
        print(f"WARNING: {result['failed']} documents failed to store")
        sys.exit(2)

    print("Index rebuild complete!")


if __name__ == "__main__":
    main()
