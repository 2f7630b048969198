"""
LocateW Output Renderer
=======================
Formats query results, counts, statistics and errors for the terminal.

Features:
  - Streaming: one line per matching path, written as it arrives
  - Counts with thousands separators
  - Statistics report for `locate -S`
  - Error messages with classification prefix
"""

import sys
from typing import Optional, TextIO

from catalog.statistics import Statistics

NO_DATABASE = "database does not exist or is invalid; regenerate it with updatedb"


def format_count(value: int) -> str:
    """1234567 -> '1,234,567'."""
    return f"{value:,}"


def format_elapsed(seconds: int) -> str:
    return f"{seconds // 60} min {seconds % 60} sec"


class Renderer:
    """
    Terminal renderer. Entries go to output, errors to error_output.
    """

    def __init__(self, output: Optional[TextIO] = None,
                 error_output: Optional[TextIO] = None):
        self.output = output or sys.stdout
        self.error_output = error_output or sys.stderr

    # ─── Public API ─────────────────────────────────────────────────

    def render_entry(self, path: str):
        self.output.write(path)
        self.output.write("\n")

    def render_count(self, count: int):
        self._print(format_count(count))

    def render_statistics(self, stats: Statistics, db_path: str):
        """Database summary, one figure per line."""
        self._print(f"Database {db_path}:")
        self._print(f"      {format_count(stats.dirs)} directories")
        self._print(f"      {format_count(stats.files)} files")
        self._print(f"      {format_count(stats.files_bytes)} bytes in file names")
        self._print(f"      {format_count(stats.db_size)} bytes used to store database")
        self._print(f"      {format_elapsed(stats.elapsed)} to generate database")

    def render_error(self, error: Exception):
        """Render an error with classification prefix."""
        prefix = self._classify_error(type(error).__name__)
        print(f"{prefix}: {error}", file=self.error_output)

    def render_no_database(self):
        print(NO_DATABASE, file=self.error_output)

    def flush(self):
        self.output.flush()

    # ─── Helpers ────────────────────────────────────────────────────

    def _classify_error(self, error_type: str) -> str:
        """Map error class name to user-friendly prefix."""
        mapping = {
            "CorruptEncodingError": "CorruptDatabase",
            "InvalidDatabaseError": "InvalidDatabase",
            "DatabaseMissingError": "MissingDatabase",
            "UnrepresentableLineError": "EncodingError",
            "FieldRangeError": "EncodingError",
            "JSONDecodeError": "InvalidStatistics",
            "ValueError": "InvalidStatistics",
            "OSError": "IOError",
            "PermissionError": "IOError",
            "FileNotFoundError": "IOError",
        }
        return mapping.get(error_type, f"Error[{error_type}]")

    def _print(self, text: str):
        """Print a line to the output stream."""
        print(text, file=self.output)
