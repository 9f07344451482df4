"""
Registry of the entities the data transfer tools know how to read, write and wipe.

Each snapshot entity name (camelCase, as written in the snapshot file) maps to
an EntityStore bound to one model. A missing entity is simply absent from the
registry, so callers check `registry.get(name) is None` instead of probing the
session for attributes.
"""
from dataclasses import dataclass
from datetime import date, datetime
from itertools import groupby
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Type
import logging

from sqlalchemy import Date, DateTime, delete, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from school_cms.database import Base
from school_cms.models import (
    AcademicCalendar,
    Album,
    Application,
    ApplicationDocument,
    BoardMember,
    DocumentType,
    Event,
    GalleryItem,
    NewsArticle,
    Newsletter,
    Policy,
    Report,
    SchoolStatistic,
    StaffMember,
    Term,
    User,
    Vacancy,
)

logger = logging.getLogger(__name__)

# Snapshot entity name -> model, in export order
ENTITY_MODELS: Dict[str, Type[Base]] = {
    "users": User,
    "staffMembers": StaffMember,
    "boardMembers": BoardMember,
    "newsArticles": NewsArticle,
    "events": Event,
    "academicCalendar": AcademicCalendar,
    "terms": Term,
    "applications": Application,
    "applicationDocuments": ApplicationDocument,
    "documentTypes": DocumentType,
    "schoolStatistics": SchoolStatistic,
    "albums": Album,
    "galleryItems": GalleryItem,
    "newsletters": Newsletter,
    "policies": Policy,
    "vacancies": Vacancy,
    "reports": Report,
}


def _coerce_value(column, value):
    """Turn JSON-decoded ISO strings back into the date/datetime objects the column expects."""
    if value is None or not isinstance(value, str):
        return value
    if isinstance(column.type, DateTime):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(column.type, Date):
        return date.fromisoformat(value[:10])
    return value


@dataclass(frozen=True)
class EntityStore:
    """find-all / create-many / delete-all over one table."""
    name: str
    model: Type[Base]

    @property
    def table(self):
        return self.model.__table__

    @property
    def table_name(self) -> str:
        return self.table.name

    def to_record(self, instance) -> Dict[str, Any]:
        """Native row representation: column key -> value."""
        return {column.key: getattr(instance, column.key) for column in self.table.columns}

    async def find_all(self, db: AsyncSession) -> List[Dict[str, Any]]:
        result = await db.execute(select(self.model))
        return [self.to_record(instance) for instance in result.scalars().all()]

    async def delete_all(self, db: AsyncSession) -> int:
        result = await db.execute(delete(self.model))
        return result.rowcount or 0

    async def create_many(
        self,
        db: AsyncSession,
        records: Sequence[Dict[str, Any]],
        skip_duplicates: bool = True,
    ) -> int:
        """
        Bulk insert raw records.

        Keys that are not columns of the table are dropped. Records are grouped
        by their key set so each executemany batch has uniform parameters.

        Returns:
            int: Number of rows inserted (duplicates skipped are not counted)
        """
        rows = list(self._prepare(records))
        if not rows:
            return 0

        stmt = self._insert_statement(db, skip_duplicates)
        inserted = 0
        rows.sort(key=lambda row: sorted(row))
        for _, batch in groupby(rows, key=lambda row: sorted(row)):
            batch = list(batch)
            result = await db.execute(stmt, batch)
            inserted += result.rowcount if result.rowcount is not None and result.rowcount >= 0 else len(batch)
        return inserted

    def _prepare(self, records: Iterable[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
        columns = {column.key: column for column in self.table.columns}
        dropped = set()
        for record in records:
            row = {}
            for key, value in record.items():
                column = columns.get(key)
                if column is None:
                    dropped.add(key)
                    continue
                row[key] = _coerce_value(column, value)
            if row:
                yield row
        if dropped:
            logger.warning(f"Ignoring unknown fields for {self.name}: {', '.join(sorted(dropped))}")

    def _insert_statement(self, db: AsyncSession, skip_duplicates: bool):
        if not skip_duplicates:
            return insert(self.table)

        dialect = db.bind.dialect.name
        if dialect == "postgresql":
            return pg_insert(self.table).on_conflict_do_nothing()
        if dialect == "sqlite":
            return sqlite_insert(self.table).on_conflict_do_nothing()
        if dialect in ("mysql", "mariadb"):
            return insert(self.table).prefix_with("IGNORE")

        logger.warning(f"No duplicate-skipping insert for dialect {dialect}; using plain INSERT")
        return insert(self.table)


class EntityRegistry:
    """Name -> EntityStore lookup, built once."""

    def __init__(self, stores: Iterable[EntityStore]):
        self._stores: Dict[str, EntityStore] = {store.name: store for store in stores}

    def get(self, name: str) -> Optional[EntityStore]:
        return self._stores.get(name)

    def names(self) -> List[str]:
        return list(self._stores)

    def __contains__(self, name: str) -> bool:
        return name in self._stores

    def __len__(self) -> int:
        return len(self._stores)


def build_default_registry(exclude: Sequence[str] = ()) -> EntityRegistry:
    """
    Registry covering every model in the schema.

    Args:
        exclude: Entity names to leave out (e.g. tables not deployed in an environment)
    """
    return EntityRegistry(
        EntityStore(name, model)
        for name, model in ENTITY_MODELS.items()
        if name not in exclude
    )
