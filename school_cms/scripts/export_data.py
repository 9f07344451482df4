#!/usr/bin/env python3
"""
Data Export
Snapshots every table of the configured database into
<DATA_TRANSFER_DIR>/export-<timestamp>.json and latest-import.json.

Usage:
    school-cms-export [--output-dir DIR]
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from school_cms.config import settings
from school_cms.database import AsyncSessionLocal, close_db
from school_cms.services.data_export import export_data
from school_cms.services.entity_registry import build_default_registry

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export the school CMS database to a JSON snapshot.")
    parser.add_argument(
        "--output-dir",
        default=settings.DATA_TRANSFER_DIR,
        help=f"Directory for the snapshot files (default: {settings.DATA_TRANSFER_DIR})",
    )
    return parser.parse_args(argv)


async def run(output_dir: Path) -> int:
    try:
        result = await export_data(AsyncSessionLocal, build_default_registry(), output_dir)
    finally:
        await close_db()

    print(f"✅ Data exported to {result.archive_path}")
    print(f"🔁 Latest export copied to {result.latest_path}")
    for skipped in result.skipped:
        print(f"⚠️  {skipped.describe()}")
    print("ℹ️  Keep these files secure and do not commit them to git.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main function. Returns the process exit code."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    args = parse_args(argv)

    if not settings.DATABASE_URL:
        print("❌ Error: DATABASE_URL is not configured")
        return 1

    try:
        return asyncio.run(run(Path(args.output_dir)))
    except Exception as e:
        logger.error(f"Failed to export data: {str(e)}", exc_info=True)
        print(f"❌ Failed to export data: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
