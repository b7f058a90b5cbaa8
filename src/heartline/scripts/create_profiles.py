"""Backfill matching profiles for accounts that do not have one yet.

Usage::

    python -m heartline.scripts.create_profiles [--dry-run]
"""
from __future__ import annotations

import argparse
import logging
import sys

from sqlalchemy import select
from sqlalchemy.orm import Session

from heartline.core.logging import configure_logging
from heartline.core.settings import settings
from heartline.db.session import SessionLocal
from heartline.models import Account, Profile
from heartline.services.matching import MatchEngine

logger = logging.getLogger(__name__)


def backfill_profiles(db: Session, *, dry_run: bool = False) -> tuple[int, int]:
    """Create a profile for every account lacking one.

    Returns ``(created, skipped)``. Nothing is committed in dry-run mode.
    """
    engine = MatchEngine(db)
    created = skipped = 0
    accounts = db.scalars(select(Account).order_by(Account.created_at)).all()
    logger.info("Found %d accounts", len(accounts))

    for account in accounts:
        if db.get(Profile, account.id) is not None:
            logger.debug("Profile already exists for %s (%s)", account.name, account.email)
            skipped += 1
            continue
        if not dry_run:
            engine.ensure_profile(account.id)
        logger.info("Created profile for %s (%s)", account.name, account.email)
        created += 1

    if dry_run:
        db.rollback()
    else:
        db.commit()
    return created, skipped


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create missing matching profiles.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be created without writing anything.",
    )
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    with SessionLocal() as db:
        created, skipped = backfill_profiles(db, dry_run=args.dry_run)

    print("=== Summary ===")
    print(f"Profiles created: {created}")
    print(f"Profiles skipped (already exist): {skipped}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
