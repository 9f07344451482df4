import json
import re
from datetime import datetime

import pytest

from school_cms.schemas import AlbumCreate, GalleryItemCreate
from school_cms.services.data_export import EXPORT_ORDER, collect_snapshot, export_data, snapshot_filename
from school_cms.services.entity_registry import build_default_registry
from school_cms.services.gallery_service import GalleryService
from school_cms.services.results import EntityStatus


def test_snapshot_filename():
    assert snapshot_filename(datetime(2026, 2, 3, 4, 5, 6)) == "export-20260203040506.json"


@pytest.mark.asyncio
async def test_export_writes_archive_and_latest(db, session_factory, item_data, tmp_path):
    album = await GalleryService.create_album(db, AlbumCreate(title="Sports"))
    await GalleryService.create_gallery_item(
        db, GalleryItemCreate(**item_data(album_id=album.id, tags=["relay"]))
    )

    result = await export_data(session_factory, build_default_registry(), tmp_path / "transfer")

    assert re.fullmatch(r"export-\d{14}\.json", result.archive_path.name)
    assert result.latest_path.name == "latest-import.json"
    archive = result.archive_path.read_text(encoding="utf-8")
    assert archive == result.latest_path.read_text(encoding="utf-8")

    document = json.loads(archive)
    assert set(document) == {"exportedAt", "counts", "data"}
    assert list(document["data"]) == list(EXPORT_ORDER)
    assert document["counts"]["albums"] == 1
    assert document["counts"]["galleryItems"] == 1
    assert document["counts"]["users"] == 0
    assert document["data"]["galleryItems"][0]["tags"] == '["relay"]'
    assert document["data"]["galleryItems"][0]["album_id"] == album.id
    assert result.skipped == []


@pytest.mark.asyncio
async def test_missing_entity_exports_as_empty_list(db, session_factory):
    registry = build_default_registry(exclude=("reports",))
    await registry.get("staffMembers").create_many(db, [{"id": "s1", "name": "A. Mokoena", "role": "Principal"}])
    await db.commit()

    payload, results = await collect_snapshot(session_factory, registry)

    assert payload.data["reports"] == []
    assert payload.counts["reports"] == 0
    assert payload.counts["staffMembers"] == 1
    skipped = [r for r in results if r.status != EntityStatus.OK]
    assert [(r.entity, r.status) for r in skipped] == [("reports", EntityStatus.SKIPPED)]


@pytest.mark.asyncio
async def test_export_of_empty_store_has_zero_total(session_factory, tmp_path):
    result = await export_data(session_factory, build_default_registry(), tmp_path)

    assert result.payload.total_records == 0
    assert all(count == 0 for count in result.payload.counts.values())
