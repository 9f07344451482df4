import logging
from datetime import date, datetime

import pytest

from school_cms.services.entity_registry import ENTITY_MODELS, EntityRegistry, build_default_registry


def test_default_registry_covers_every_entity():
    registry = build_default_registry()

    assert len(registry) == 17
    assert registry.names() == list(ENTITY_MODELS)
    assert registry.get("galleryItems").table_name == "gallery_items"
    assert registry.get("academicCalendar").table_name == "academic_calendar"


def test_excluded_entities_are_absent():
    registry = build_default_registry(exclude=("reports",))

    assert "reports" not in registry
    assert registry.get("reports") is None
    assert len(registry) == 16


def test_empty_registry():
    registry = EntityRegistry([])

    assert registry.names() == []
    assert registry.get("users") is None


@pytest.mark.asyncio
async def test_create_many_skips_duplicates(db):
    store = build_default_registry().get("documentTypes")
    record = {"id": "dt-birth", "code": "BIRTH_CERT", "label": "Birth certificate", "is_required": True}

    assert await store.create_many(db, [record]) == 1
    await db.commit()
    assert await store.create_many(db, [record, {**record, "id": "dt-other"}]) == 0
    await db.commit()

    rows = await store.find_all(db)
    assert [row["id"] for row in rows] == ["dt-birth"]
    assert rows[0]["is_required"] is True


@pytest.mark.asyncio
async def test_create_many_drops_unknown_fields(db, caplog):
    store = build_default_registry().get("reports")

    with caplog.at_level(logging.WARNING):
        inserted = await store.create_many(db, [{"id": "r1", "title": "Annual report", "legacyFlag": True}])
    await db.commit()

    assert inserted == 1
    assert "legacyFlag" in caplog.text
    assert (await store.find_all(db))[0]["title"] == "Annual report"


@pytest.mark.asyncio
async def test_create_many_handles_mixed_key_sets(db):
    store = build_default_registry().get("staffMembers")
    records = [
        {"id": "s1", "name": "A. Mokoena", "role": "Principal"},
        {"id": "s2", "name": "B. Naidoo", "role": "Teacher", "grade": "4", "display_order": 2},
    ]

    assert await store.create_many(db, records) == 2
    await db.commit()

    rows = {row["id"]: row for row in await store.find_all(db)}
    assert rows["s1"]["grade"] is None
    assert rows["s1"]["display_order"] == 0
    assert rows["s2"]["grade"] == "4"


@pytest.mark.asyncio
async def test_iso_strings_become_dates(db):
    registry = build_default_registry()
    await registry.get("events").create_many(
        db, [{"id": "e1", "title": "Sports day", "start_date": "2026-03-14T08:30:00.000Z"}]
    )
    await registry.get("terms").create_many(
        db,
        [{
            "id": "t1", "year": 2026, "term_number": 1, "name": "Term 1",
            "start_date": "2026-01-14T00:00:00.000Z", "end_date": "2026-03-27",
        }],
    )
    await db.commit()

    event = (await registry.get("events").find_all(db))[0]
    assert isinstance(event["start_date"], datetime)
    assert (event["start_date"].month, event["start_date"].hour) == (3, 8)

    term = (await registry.get("terms").find_all(db))[0]
    assert term["start_date"] == date(2026, 1, 14)
    assert term["end_date"] == date(2026, 3, 27)


@pytest.mark.asyncio
async def test_delete_all_returns_row_count(db):
    store = build_default_registry().get("vacancies")
    await store.create_many(db, [
        {"id": "v1", "title": "Maths teacher", "description": "Grade 8-12"},
        {"id": "v2", "title": "Groundsman", "description": "Full time"},
    ])
    await db.commit()

    assert await store.delete_all(db) == 2
    await db.commit()
    assert await store.find_all(db) == []
