"""
thoughtbank - agent thoughts in SQLite, mirrored into a vector index.
"""

from thoughtbank.core.config import VERSION

__version__ = VERSION
