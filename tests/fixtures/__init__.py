"""Test fixtures for pytest.

This module re-exports commonly used test doubles for easier importing.
"""

from .memory_store import MemoryCollection, MemoryCursor, collation_key, matches

__all__ = [
    "MemoryCollection",
    "MemoryCursor",
    "collation_key",
    "matches",
]
