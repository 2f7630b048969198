"""
LocateW File Locations
======================
Where the database and its companion files live.

  <tempdir>/locate.db     front-coded database
  <tempdir>/locate.txt    statistics sidecar
  <tempdir>/dirlist.txt   walk output, removed after compression
  <tempdir>/locate.db1    database being written, renamed over locate.db

LOCATEW_DATABASE overrides the database path; the other files follow it.
"""

import os
import tempfile

DATABASE_ENV = "LOCATEW_DATABASE"
DATABASE_NAME = "locate.db"
DIRLIST_NAME = "dirlist.txt"


def default_database_path() -> str:
    """Database path from the environment, else the temp directory."""
    override = os.environ.get(DATABASE_ENV)
    if override:
        return os.path.abspath(override)
    return os.path.join(tempfile.gettempdir(), DATABASE_NAME)


def statistics_path(db_path: str) -> str:
    """Sidecar next to the database: locate.db -> locate.txt."""
    root, _ = os.path.splitext(db_path)
    return root + ".txt"


def staging_path(db_path: str) -> str:
    """Temporary database written before replacing the real one."""
    return db_path + "1"


def dirlist_path(db_path: str) -> str:
    return os.path.join(os.path.dirname(os.path.abspath(db_path)), DIRLIST_NAME)
