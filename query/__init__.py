"""
LocateW Query Layer
===================
Pattern matching and the threaded decode → match pipeline.

Usage:
    from query import PatternSet, QueryOptions, QueryPipeline
"""

from query.matcher import PatternSet, normalize_pattern
from query.pipeline import (
    QUEUE_CAPACITY, EntryChannel, QueryOptions, QueryPipeline,
    classify_entry, basename,
)

__all__ = [
    "PatternSet", "normalize_pattern",
    "QUEUE_CAPACITY", "EntryChannel", "QueryOptions", "QueryPipeline",
    "classify_entry", "basename",
]
