"""
LocateW Directory Walker
========================
Depth-first, pre-order traversal producing (path, is_dir) pairs.

Order: the root first, then each directory's entries sorted by name, a
directory immediately followed by its own contents. Adjacent entries
therefore share long prefixes, which is what the front-coding relies on.

Symlinks are not followed. Entries that cannot be read are skipped.
"""

import logging
import os
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)

DIR_SUFFIX = "\\"


def walk(root: str) -> Iterator[Tuple[str, bool]]:
    """Yield (path, is_dir) for root and everything below it."""
    if not os.path.isdir(root):
        if os.path.lexists(root):
            yield root, False
        else:
            logger.debug("Walk root does not exist: %s", root)
        return

    yield root, True
    # Stack of pending entry lists, each already sorted; popped front to back
    stack: List[Iterator[os.DirEntry]] = [iter(_scan(root))]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.debug("Skipping %s: %s", entry.path, e)
            continue
        yield entry.path, is_dir
        if is_dir:
            stack.append(iter(_scan(entry.path)))


def _scan(path: str) -> List[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Cannot read directory %s: %s", path, e)
        return []


def format_entry(path: str, is_dir: bool) -> str:
    """
    Database line for a walked path. Directories end with a backslash.
    Names that are not valid Unicode are replaced lossily.
    """
    line = path.encode("utf-8", "replace").decode("utf-8")
    if is_dir and not line.endswith(DIR_SUFFIX):
        line += DIR_SUFFIX
    return line
