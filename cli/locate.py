"""
LocateW `locate` Command
========================
Search the path database.

Usage:
    locate [options] PATTERN...
    locate -S

Options:
    -S, --statistics      print statistics about the database instead
    -a, --all             only print entries that match all patterns
    -b, --basename        match only the base name of path names
    -c, --count           only print the number of matching entries
    -C, --case-sensitive  case distinctions when matching patterns
    -l, --limit N         stop after N entries
    --database PATH       database file (default: <tempdir>/locate.db)
    -v, --verbose         debug logging on stderr

Patterns are globs. Unless a pattern starts with '/' or starts or ends
with '*', it matches anywhere in the path ("bob" means "*bob*").
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from catalog.paths import default_database_path, statistics_path
from catalog.statistics import DatabaseMissingError, Statistics
from cli import configure_logging
from cli.renderer import Renderer
from codec.errors import CorruptEncodingError, InvalidDatabaseError
from codec.frcode import iter_database
from query.matcher import PatternSet
from query.pipeline import QueryOptions, QueryPipeline

logger = logging.getLogger(__name__)

VERSION = "0.6.10"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locate",
        description="Find paths in the LocateW database.",
        epilog="A pattern without wildcards matches anywhere in the path.",
    )
    parser.add_argument("-S", "--statistics", action="store_true",
                        help="don't search for entries, print statistics about database")
    parser.add_argument("-a", "--all", dest="match_all", action="store_true",
                        help="only print entries that match all patterns")
    parser.add_argument("-b", "--basename", action="store_true",
                        help="match only the base name of path names")
    parser.add_argument("-c", "--count", action="store_true",
                        help="only print number of found entries")
    parser.add_argument("-C", "--case-sensitive", action="store_true",
                        help="case distinctions when matching patterns")
    parser.add_argument("-l", "--limit", type=int, default=None,
                        help="limit output (or counting) to LIMIT entries")
    parser.add_argument("--database", default=None,
                        help="path of the database file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("patterns", nargs="*", metavar="PATTERN")
    return parser


def show_statistics(db_path: str, renderer: Renderer) -> int:
    try:
        stats = Statistics.load(statistics_path(db_path))
    except DatabaseMissingError:
        renderer.render_no_database()
        return 1
    except (ValueError, OSError) as e:
        renderer.render_error(e)
        return 1
    renderer.render_statistics(stats, db_path)
    return 0


def search(args: argparse.Namespace, db_path: str, renderer: Renderer) -> int:
    """Run the query pipeline and print matches or their count."""
    if args.limit == 0:
        if args.count:
            renderer.render_count(0)
        return 0

    if not os.path.isfile(db_path):
        renderer.render_no_database()
        return 1

    patterns = PatternSet(args.patterns, case_sensitive=args.case_sensitive)
    options = QueryOptions(match_all=args.match_all, basename=args.basename,
                           limit=args.limit)
    pipeline = QueryPipeline(patterns, options)
    sink = None if args.count else renderer.render_entry

    try:
        count = pipeline.run(lambda: iter_database(db_path), sink)
    except InvalidDatabaseError as e:
        logger.debug("Rejected database %s: %s", db_path, e)
        renderer.render_no_database()
        return 1
    except CorruptEncodingError as e:
        renderer.render_error(e)
        return 1
    except BrokenPipeError:
        raise
    except OSError as e:
        renderer.render_error(e)
        return 1

    if args.count:
        renderer.render_count(count)
    renderer.flush()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.limit is not None and args.limit < 0:
        parser.error("--limit must not be negative")
    if not args.statistics and not args.patterns:
        parser.error("the following arguments are required: PATTERN")

    db_path = args.database or default_database_path()
    renderer = Renderer()

    if args.statistics:
        return show_statistics(db_path, renderer)

    try:
        return search(args, db_path, renderer)
    except BrokenPipeError:
        # Reader went away (e.g. piped into `head`); silence the final flush
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 1


if __name__ == "__main__":
    sys.exit(main())
