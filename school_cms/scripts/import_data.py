#!/usr/bin/env python3
"""
Data Import
Replaces the contents of the configured database with a snapshot written by
school-cms-export. Run it only while nothing else writes to the database.

Usage:
    school-cms-import [PATH]    PATH defaults to <DATA_TRANSFER_DIR>/latest-import.json
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from school_cms.config import settings
from school_cms.database import AsyncSessionLocal, close_db
from school_cms.errors import CorruptSnapshotError
from school_cms.services.data_import import ImportReport, ImportStatus, import_data, load_snapshot
from school_cms.services.entity_registry import build_default_registry

logger = logging.getLogger(__name__)


def resolve_input_path(path: Optional[str]) -> Path:
    if path:
        return Path(path).resolve()
    return settings.latest_snapshot_path.resolve()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import a JSON snapshot into the school CMS database.")
    parser.add_argument(
        "path",
        nargs="?",
        help=f"Snapshot file (default: {settings.latest_snapshot_path})",
    )
    return parser.parse_args(argv)


async def run(input_path: Path) -> ImportReport:
    # Parse before opening a session: a bad file must not touch the database
    payload = load_snapshot(input_path)
    try:
        async with AsyncSessionLocal() as session:
            return await import_data(session, build_default_registry(), payload, source=input_path)
    finally:
        await close_db()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function. Returns the process exit code."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    args = parse_args(argv)
    input_path = resolve_input_path(args.path)

    if not settings.DATABASE_URL:
        print("❌ Error: DATABASE_URL is not configured")
        return 1

    print(f"📥 Importing data from {input_path}")
    try:
        report = asyncio.run(run(input_path))
    except CorruptSnapshotError as e:
        print(f"❌ {str(e)}")
        return 1
    except Exception as e:
        logger.error(f"Failed to import data: {str(e)}", exc_info=True)
        print(f"❌ Failed to import data: {str(e)}")
        return 1

    if report.status == ImportStatus.ABORTED:
        print(f"⚠️  {report.summary()}")
    elif report.status == ImportStatus.PARTIAL:
        print(f"⚠️  {report.summary()}")
        for problem in report.problems:
            print(f"   - {problem.describe()}")
        for album_id, reason in report.cover_failures.items():
            print(f"   - cover for album {album_id}: {reason}")
    else:
        print(f"✅ {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
