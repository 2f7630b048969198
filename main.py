"""
LocateW: locate/updatedb for Windows
====================================
Entry point for both commands.

Usage:
    python main.py updatedb [options]
    python main.py locate [options] PATTERN...

Run a command with --help for its options.
"""

import sys


def print_help():
    print("""
LocateW: locate/updatedb for Windows

Usage:
    python main.py updatedb [--root DIR ...] [--database PATH]
    python main.py locate [options] PATTERN...
    python main.py locate -S

Commands:
    updatedb    Walk the fixed drives and rebuild the database
    locate      Search the database for matching paths
""")


def main() -> int:
    """Dispatch to the requested command."""
    args = sys.argv[1:]

    if not args or args[0] in ("--help", "-h"):
        print_help()
        return 0

    command, rest = args[0], args[1:]
    if command == "locate":
        from cli.locate import main as locate_main
        return locate_main(rest)
    if command == "updatedb":
        from cli.updatedb import main as updatedb_main
        return updatedb_main(rest)

    print(f"Unknown command: {command}", file=sys.stderr)
    print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
