"""
Export every entity into one JSON snapshot.

Reads run concurrently, one session per entity, and a failing or missing entity
contributes an empty list instead of aborting the export. The snapshot is a
point-in-time, non-atomic read: rows written while the export runs may or may
not be included.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from school_cms.config import settings
from school_cms.errors import StoreUnavailableError
from school_cms.schemas import ExportPayload
from school_cms.services.entity_registry import ENTITY_MODELS, EntityRegistry
from school_cms.services.results import EntityResult, EntityStatus

logger = logging.getLogger(__name__)

EXPORT_ORDER: Tuple[str, ...] = tuple(ENTITY_MODELS)


@dataclass
class ExportResult:
    payload: ExportPayload
    archive_path: Path
    latest_path: Path
    results: List[EntityResult] = field(default_factory=list)

    @property
    def skipped(self) -> List[EntityResult]:
        return [result for result in self.results if result.status != EntityStatus.OK]


async def _read_entity(
    session_factory: async_sessionmaker,
    registry: EntityRegistry,
    name: str,
) -> Tuple[List[Dict[str, Any]], EntityResult]:
    store = registry.get(name)
    if store is None:
        error = StoreUnavailableError(name, "entity not registered")
        logger.warning(f"Skipping {name}: {error.reason}")
        return [], EntityResult(name, "export", EntityStatus.SKIPPED, error=error.reason)

    try:
        async with session_factory() as session:
            records = await store.find_all(session)
    except SQLAlchemyError as e:
        error = StoreUnavailableError(name, str(e), cause=e)
        logger.warning(f"Skipping {name}: {error.reason}")
        return [], EntityResult(name, "export", EntityStatus.FAILED, error=error.reason)

    return records, EntityResult(name, "export", EntityStatus.OK, count=len(records))


def snapshot_filename(moment: datetime) -> str:
    return f"export-{moment.strftime('%Y%m%d%H%M%S')}.json"


async def collect_snapshot(
    session_factory: async_sessionmaker,
    registry: EntityRegistry,
    entity_names: Sequence[str] = EXPORT_ORDER,
) -> Tuple[ExportPayload, List[EntityResult]]:
    """
    Read every entity concurrently and assemble the snapshot payload.

    Returns:
        (payload, per-entity results) in the order of entity_names
    """
    outcomes = await asyncio.gather(
        *(_read_entity(session_factory, registry, name) for name in entity_names)
    )

    data = {}
    counts = {}
    results = []
    for name, (records, result) in zip(entity_names, outcomes):
        data[name] = records
        counts[name] = len(records)
        results.append(result)

    payload = ExportPayload(
        exported_at=datetime.now(timezone.utc),
        counts=counts,
        data=data,
    )
    return payload, results


async def export_data(
    session_factory: async_sessionmaker,
    registry: EntityRegistry,
    output_dir: Path,
    entity_names: Sequence[str] = EXPORT_ORDER,
) -> ExportResult:
    """
    Snapshot the store into output_dir.

    Writes export-<timestamp>.json and latest-import.json with identical content.

    Args:
        session_factory: Factory for the per-entity read sessions
        registry: Entities that can be read
        output_dir: Directory for both files (created if missing)
        entity_names: Entities to include, in snapshot order

    Returns:
        ExportResult: The payload, both file paths and per-entity results
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Collecting data from database...")
    payload, results = await collect_snapshot(session_factory, registry, entity_names)

    archive_path = output_dir / snapshot_filename(payload.exported_at)
    latest_path = output_dir / settings.LATEST_SNAPSHOT_NAME

    document = payload.model_dump_json(by_alias=True, indent=2)
    archive_path.write_text(document, encoding="utf-8")
    latest_path.write_text(document, encoding="utf-8")

    logger.info(f"Data exported to {archive_path} ({payload.total_records} records)")
    logger.info(f"Latest export copied to {latest_path}")

    return ExportResult(
        payload=payload,
        archive_path=archive_path,
        latest_path=latest_path,
        results=results,
    )
