"""
LocateW Database Builder
========================
Walk → dir list → compress → swap in.

Steps:
  1. Walk every root, writing one line per entry to dirlist.txt
     (directories end with a backslash) and counting dirs, files and
     file-path bytes. Paths holding a newline or longer than
     MAX_LINE_BYTES are logged and left out.
  2. Compress dirlist.txt into locate.db1.
  3. Remove dirlist.txt and replace locate.db with locate.db1.
  4. Save the statistics sidecar.

The live database is only ever replaced by a complete file, so a
concurrent `locate` sees either the old or the new one.
"""

import logging
import os
import time
from typing import Iterable, Optional

from catalog.paths import dirlist_path, staging_path, statistics_path
from catalog.statistics import Statistics
from codec.frcode import MAX_LINE_BYTES, compress_file
from updatedb.walker import format_entry, walk

logger = logging.getLogger(__name__)


def write_dirlist(roots: Iterable[str], out_path: str, stats: Statistics) -> None:
    """Walk roots into a newline-separated dir list, updating stats."""
    with open(out_path, "w", encoding="utf-8", newline="\n") as out:
        for root in roots:
            logger.info("Indexing %s", root)
            for path, is_dir in walk(root):
                if "\n" in path or "\r" in path:
                    logger.debug("Skipping path with newline: %r", path)
                    continue
                line = format_entry(path, is_dir)
                size = len(line.encode("utf-8"))
                if size > MAX_LINE_BYTES:
                    logger.warning("Skipping path longer than %d bytes (%d): %s...",
                                   MAX_LINE_BYTES, size, line[:80])
                    continue
                out.write(line)
                out.write("\n")
                if is_dir:
                    stats.dirs += 1
                else:
                    stats.files += 1
                    stats.files_bytes += size


def build_database(roots: Iterable[str], db_path: str,
                   stats_path: Optional[str] = None) -> Statistics:
    """
    Build the database for roots at db_path and write its statistics.
    Returns the statistics.
    """
    start = time.monotonic()
    db_path = os.path.abspath(db_path)
    stats_path = stats_path or statistics_path(db_path)
    os.makedirs(os.path.dirname(db_path), exist_ok=True)

    stats = Statistics()
    dirlist = dirlist_path(db_path)
    staging = staging_path(db_path)

    try:
        write_dirlist(roots, dirlist, stats)
        stats.db_size = compress_file(dirlist, staging)
    except Exception:
        for leftover in (dirlist, staging):
            if os.path.exists(leftover):
                os.unlink(leftover)
        raise

    os.unlink(dirlist)
    os.replace(staging, db_path)

    stats.elapsed = int(time.monotonic() - start)
    stats.save(stats_path)
    logger.info("Database %s: %d dirs, %d files, %d bytes",
                db_path, stats.dirs, stats.files, stats.db_size)
    return stats
