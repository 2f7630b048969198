"""
LocateW Pattern Matching
========================
Glob patterns compiled once and tested against candidate strings.

Pattern rules (implicit globbing):
  "/foo*bar"  → "foo*bar"   leading slash: use the rest as-is
  "*.txt"     → "*.txt"     starts or ends with '*': as-is
  "bob"       → "*bob*"     anything else matches anywhere

Glob syntax is fnmatch's: '*' (any run, separators included), '?',
'[seq]', '[!seq]'. Backslash is an ordinary character, so Windows
paths can appear literally in a pattern.
"""

import fnmatch
import re
from typing import Iterable, List, Pattern


def normalize_pattern(pattern: str) -> str:
    """Apply the implicit globbing rules to one user pattern."""
    if pattern.startswith("/"):
        return pattern[1:]
    if pattern.startswith("*") or pattern.endswith("*"):
        return pattern
    return f"*{pattern}*"


class PatternSet:
    """
    Compiled set of glob patterns.

    Case-insensitive unless case_sensitive=True.
    """

    def __init__(self, patterns: Iterable[str], case_sensitive: bool = False):
        self.patterns: List[str] = [normalize_pattern(p) for p in patterns]
        if not self.patterns:
            raise ValueError("At least one pattern is required")
        self.case_sensitive = case_sensitive

        flags = 0 if case_sensitive else re.IGNORECASE
        self._compiled: List[Pattern[str]] = [
            re.compile(fnmatch.translate(p), flags) for p in self.patterns
        ]

    def __len__(self) -> int:
        return len(self._compiled)

    def __repr__(self) -> str:
        return f"PatternSet({self.patterns!r}, case_sensitive={self.case_sensitive})"

    def is_match(self, candidate: str) -> bool:
        """True if any pattern matches."""
        return any(rx.match(candidate) for rx in self._compiled)

    def count_matches(self, candidate: str) -> int:
        """Number of patterns that match."""
        return sum(1 for rx in self._compiled if rx.match(candidate))

    def matches(self, candidate: str, match_all: bool = False) -> bool:
        """Apply "any" or "all" semantics."""
        if len(self._compiled) == 1 or not match_all:
            return self.is_match(candidate)
        return self.count_matches(candidate) == len(self._compiled)
