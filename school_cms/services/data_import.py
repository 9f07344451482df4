"""
Restore a snapshot produced by the export tool.

The import wipes existing rows (dependents first), bulk-inserts the snapshot
(referenced tables first), re-links album covers and resets the integer
sequences of the admissions tables. Every step commits on its own; a failing
entity is recorded in the report and the run carries on. Intended for
maintenance windows with no concurrent writers.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from school_cms.errors import CorruptSnapshotError
from school_cms.models import Album
from school_cms.schemas import ExportPayload
from school_cms.services.entity_registry import EntityRegistry
from school_cms.services.results import EntityResult, EntityStatus

logger = logging.getLogger(__name__)

# Dependents before the tables they reference. Users are handled separately.
DELETE_ORDER: Tuple[str, ...] = (
    "applicationDocuments",
    "applications",
    "galleryItems",
    "albums",
    "newsArticles",
    "events",
    "academicCalendar",
    "terms",
    "boardMembers",
    "staffMembers",
    "newsletters",
    "policies",
    "vacancies",
    "reports",
    "schoolStatistics",
    "documentTypes",
)

# Referenced tables before their dependents. Users are handled separately.
INSERT_ORDER: Tuple[str, ...] = (
    "staffMembers",
    "boardMembers",
    "newsArticles",
    "events",
    "academicCalendar",
    "terms",
    "policies",
    "vacancies",
    "newsletters",
    "reports",
    "documentTypes",
    "schoolStatistics",
    "albums",
    "galleryItems",
    "applications",
    "applicationDocuments",
)

# (entity, table, column) for integer keys that must continue after the imported max
SEQUENCES: Tuple[Tuple[str, str, str], ...] = (
    ("applications", "applications", "id"),
    ("applicationDocuments", "application_documents", "id"),
)


class ImportStatus(str, Enum):
    COMPLETED = "completed"
    PARTIAL = "partial"
    ABORTED = "aborted"


@dataclass
class ImportReport:
    source: Optional[Path] = None
    total_records: int = 0
    aborted_reason: Optional[str] = None
    results: List[EntityResult] = field(default_factory=list)
    covers_restored: int = 0
    cover_failures: Dict[str, str] = field(default_factory=dict)

    @property
    def status(self) -> ImportStatus:
        if self.aborted_reason:
            return ImportStatus.ABORTED
        if self.problems or self.cover_failures:
            return ImportStatus.PARTIAL
        return ImportStatus.COMPLETED

    @property
    def problems(self) -> List[EntityResult]:
        return [result for result in self.results if result.status != EntityStatus.OK]

    def record(self, result: EntityResult) -> None:
        self.results.append(result)
        if result.status != EntityStatus.OK:
            logger.warning(f"Import step {result.describe()}")

    def summary(self) -> str:
        if self.status == ImportStatus.ABORTED:
            return f"Import aborted: {self.aborted_reason}"
        inserted = sum(r.count for r in self.results if r.operation == "create" and r.status == EntityStatus.OK)
        line = f"Import {self.status.value}: {inserted} records inserted, {self.covers_restored} album covers restored"
        if self.status == ImportStatus.PARTIAL:
            line += f", {len(self.problems)} entity steps skipped or failed, {len(self.cover_failures)} cover failures"
        return line


def load_snapshot(path: Path) -> ExportPayload:
    """
    Read and validate a snapshot file.

    Raises:
        CorruptSnapshotError: If the file cannot be read or is not a snapshot
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CorruptSnapshotError(path, f"unreadable file ({e.strerror or e})") from e
    except UnicodeDecodeError as e:
        raise CorruptSnapshotError(path, f"not UTF-8 text ({e.reason} at byte {e.start})") from e

    if not raw.strip():
        raise CorruptSnapshotError(path, "file is empty")

    try:
        return ExportPayload.model_validate_json(raw)
    except ValidationError as e:
        raise CorruptSnapshotError(path, f"not a valid snapshot: {e.error_count()} validation errors") from e


async def _delete_entity(db: AsyncSession, registry: EntityRegistry, name: str) -> EntityResult:
    store = registry.get(name)
    if store is None:
        return EntityResult(name, "delete", EntityStatus.SKIPPED, error="entity not registered")

    try:
        deleted = await store.delete_all(db)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        return EntityResult(name, "delete", EntityStatus.FAILED, error=str(e))

    return EntityResult(name, "delete", EntityStatus.OK, count=deleted)


async def _create_entity(
    db: AsyncSession,
    registry: EntityRegistry,
    name: str,
    records: List[Dict[str, Any]],
) -> Optional[EntityResult]:
    if not records:
        return None

    store = registry.get(name)
    if store is None:
        return EntityResult(name, "create", EntityStatus.SKIPPED, error="entity not registered")

    try:
        inserted = await store.create_many(db, records, skip_duplicates=True)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        return EntityResult(name, "create", EntityStatus.FAILED, error=str(e))
    except (ValueError, TypeError) as e:
        # Bad field value in the snapshot (e.g. an unparseable date)
        await db.rollback()
        return EntityResult(name, "create", EntityStatus.FAILED, error=f"invalid record: {e}")

    if inserted < len(records):
        logger.info(f"{name}: {len(records) - inserted} duplicate records skipped")
    return EntityResult(name, "create", EntityStatus.OK, count=inserted)


def detach_album_covers(albums: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], Dict[str, str]]:
    """
    Split cover references off album records.

    Returns:
        (album records with cover_image_id set to None, album id -> cover id)
    """
    covers = {}
    detached = []
    for album in albums:
        album = dict(album)
        cover_id = album.get("cover_image_id")
        if cover_id:
            covers[album["id"]] = cover_id
        album["cover_image_id"] = None
        detached.append(album)
    return detached, covers


async def restore_album_covers(db: AsyncSession, covers: Dict[str, str], report: ImportReport) -> None:
    """Point each album back at its cover, one update per album."""
    if not covers:
        return

    logger.info("Restoring album cover references...")
    for album_id, cover_id in covers.items():
        try:
            result = await db.execute(
                update(Album)
                .where(Album.id == album_id)
                .values(cover_image_id=cover_id)
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            report.cover_failures[album_id] = str(e)
            logger.warning(f"Unable to set cover image for album {album_id}: {e}")
            continue

        if result.rowcount == 0:
            report.cover_failures[album_id] = "album not found"
            logger.warning(f"Unable to set cover image for album {album_id}: album not found")
        else:
            report.covers_restored += 1


async def reset_sequence(db: AsyncSession, table: str, column: str = "id") -> None:
    """
    Move an auto-increment counter to max(column) + 1.
    SQLite rowid tables already allocate max + 1, so nothing is issued there.
    """
    dialect = db.bind.dialect.name
    if dialect == "postgresql":
        await db.execute(text(
            f"SELECT setval(pg_get_serial_sequence('\"{table}\"', '{column}'), "
            f"COALESCE((SELECT MAX(\"{column}\") FROM \"{table}\"), 0) + 1, false)"
        ))
    elif dialect in ("mysql", "mariadb"):
        next_id = (await db.execute(text(f"SELECT COALESCE(MAX(`{column}`), 0) + 1 FROM `{table}`"))).scalar()
        await db.execute(text(f"ALTER TABLE `{table}` AUTO_INCREMENT = {int(next_id)}"))
    else:
        logger.debug(f"No sequence reset needed for {table}.{column} on {dialect}")
        return
    await db.commit()


async def import_data(
    db: AsyncSession,
    registry: EntityRegistry,
    payload: ExportPayload,
    source: Optional[Path] = None,
) -> ImportReport:
    """
    Replace the store's contents with a snapshot.

    Args:
        db: Session used for every step, sequentially
        registry: Entities that can be wiped and recreated
        payload: Parsed snapshot (see load_snapshot)
        source: Where the payload came from, for reporting

    Returns:
        ImportReport: Per-entity results; status is aborted for an empty snapshot
    """
    report = ImportReport(source=source, total_records=payload.total_records)

    if report.total_records == 0:
        report.aborted_reason = "snapshot contains zero records"
        logger.warning("Import file contains zero records. Aborting to avoid wiping the database.")
        logger.warning("Generate a fresh export from your source database and try again.")
        return report

    data = payload.data
    users = data.get("users") or []

    logger.info("Clearing existing records...")
    for name in DELETE_ORDER:
        report.record(await _delete_entity(db, registry, name))
    # An empty users list means "leave users alone", not "delete all users"
    if users:
        report.record(await _delete_entity(db, registry, "users"))

    albums, covers = detach_album_covers(data.get("albums") or [])

    logger.info("Inserting records...")
    if users:
        result = await _create_entity(db, registry, "users", users)
        if result:
            report.record(result)
    for name in INSERT_ORDER:
        records = albums if name == "albums" else (data.get(name) or [])
        result = await _create_entity(db, registry, name, records)
        if result:
            report.record(result)

    await restore_album_covers(db, covers, report)

    for name, table, column in SEQUENCES:
        if name not in registry:
            continue
        try:
            await reset_sequence(db, table, column)
        except SQLAlchemyError as e:
            await db.rollback()
            report.record(EntityResult(name, "reset_sequence", EntityStatus.FAILED, error=str(e)))

    logger.info(report.summary())
    return report
