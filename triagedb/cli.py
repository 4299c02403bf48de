"""
Command-line entrypoint.

    triagedb init            # create/update validators and indexes
    triagedb seed [--drop]   # insert sample patients and triage entries
"""

from __future__ import annotations

import argparse
import logging
import sys

from triagedb.bootstrap.reconcile import reconcile
from triagedb.bootstrap.seed import seed
from triagedb.config import settings
from triagedb.models.database import get_db

logger = logging.getLogger(__name__)

FAILURE_LABELS = {"init": "Initialization", "seed": "Seeding"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="triagedb",
        description="Bootstrap the triage MongoDB database.",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("init", help="Create collections with validators and ensure indexes")
    seed_parser = commands.add_parser("seed", help="Insert sample patients and triage entries")
    seed_parser.add_argument(
        "--drop",
        action="store_true",
        help="Delete existing documents from all collections first",
    )
    return parser


def run_init() -> list[str]:
    with get_db() as db:
        return reconcile(db).lines()


def run_seed(drop: bool) -> list[str]:
    with get_db() as db:
        return seed(db, drop=drop).lines()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    try:
        if args.command == "init":
            lines = run_init()
        else:
            lines = run_seed(args.drop)
    except Exception as exc:
        logger.debug("Unhandled failure", exc_info=True)
        print(f"{FAILURE_LABELS[args.command]} failed: {exc}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
