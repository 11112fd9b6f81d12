"""Command line entry point for cron-driven maintenance.

Usage::

    town-hall-admin init-db
    town-hall-admin recompute
    town-hall-admin digest
"""
from __future__ import annotations

import argparse
import logging
import sys

from town_hall.db import session as db_session
from town_hall.db.session import SessionLocal
from town_hall.services.digest import send_digest
from town_hall.services.errors import BackendFailure
from town_hall.services.mail import get_mail_transport
from town_hall.services.scoring import recompute_all

logger = logging.getLogger("town_hall.admin")


def _init_db(_: argparse.Namespace) -> int:
    tables = db_session.create_tables()
    print(f"Database ready: {', '.join(tables)}")
    return 0


def _recompute(_: argparse.Namespace) -> int:
    with SessionLocal() as session:
        count = recompute_all(session)
    print(f"Recomputed scores for {count} questions")
    return 0


def _digest(_: argparse.Namespace) -> int:
    with SessionLocal() as session:
        sent = send_digest(session, get_mail_transport())
    print("Digest sent" if sent else "Nothing to send")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="town-hall-admin", description=__doc__.splitlines()[0])
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init-db", help="create missing tables (development only)").set_defaults(func=_init_db)
    sub.add_parser("recompute", help="recount every question's score").set_defaults(func=_recompute)
    sub.add_parser("digest", help="email the daily digest").set_defaults(func=_digest)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        return args.func(args)
    except BackendFailure as exc:
        logger.error("%s", exc, exc_info=exc.__cause__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
