"""
LocateW `updatedb` Command
==========================
Rebuild the path database from the fixed drives (or the given roots).

Usage:
    updatedb [--root DIR ...] [--database PATH] [-v]
"""

import argparse
import logging
import sys
from typing import List, Optional

from catalog.paths import default_database_path
from cli import configure_logging
from cli.renderer import Renderer
from codec.errors import FrcodeError
from updatedb.builder import build_database
from updatedb.drives import fixed_drives

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="updatedb",
        description="Rebuild the LocateW path database.",
    )
    parser.add_argument("--root", action="append", dest="roots", default=None,
                        metavar="DIR",
                        help="directory to index (repeatable; default: all fixed drives)")
    parser.add_argument("--database", default=None,
                        help="path of the database file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug logging on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    renderer = Renderer()
    db_path = args.database or default_database_path()

    try:
        roots = args.roots or fixed_drives()
        logger.debug("Indexing roots: %s", roots)
        build_database(roots, db_path)
    except (OSError, FrcodeError) as e:
        renderer.render_error(e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
