"""
Top-level CLI dispatcher: quoteboard <command> [args...].
All commands dispatch to package CLI modules.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="quoteboard",
        description="Metal, oil and FX quote snapshots for the static dashboard",
    )
    subparsers = parser.add_subparsers(dest="command", help="command")
    subparsers.add_parser("refresh", help="Resolve quotes and write commodities.json / pairs.json", add_help=False)
    subparsers.add_parser("providers", help="List providers and configured priority order", add_help=False)

    args, rest = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if args.command == "refresh":
        from quoteboard.cli import refresh as mod

        return mod.main(rest)
    if args.command == "providers":
        from quoteboard.cli import providers as mod

        return mod.main(rest)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
