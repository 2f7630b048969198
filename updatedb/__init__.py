"""
LocateW Indexer
===============
Drive enumeration, directory walk and database build.

Usage:
    from updatedb import build_database, fixed_drives
    stats = build_database(fixed_drives(), "locate.db")
"""

from updatedb.drives import drive_bits, present_drives, fixed_drives
from updatedb.walker import walk, format_entry
from updatedb.builder import build_database, write_dirlist

__all__ = [
    "drive_bits", "present_drives", "fixed_drives",
    "walk", "format_entry",
    "build_database", "write_dirlist",
]
