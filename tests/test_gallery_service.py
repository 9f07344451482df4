from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from school_cms.errors import DuplicateAlbumError, InvalidReferenceError, NotFoundError
from school_cms.models import Album, GalleryItem
from school_cms.schemas import (
    AlbumCreate,
    AlbumUpdate,
    GalleryFilters,
    GalleryItemCreate,
    GalleryItemUpdate,
)
from school_cms.services.gallery_service import GalleryService


async def _create_item(db, item_data, title="Sports day", **overrides):
    return await GalleryService.create_gallery_item(db, GalleryItemCreate(**item_data(title, **overrides)))


# ==================== Gallery items ====================

@pytest.mark.asyncio
async def test_tags_survive_create_list_get_and_update(db, item_data):
    tags = ["sports day", "grade 7", "relay ü"]
    created = await _create_item(db, item_data, tags=tags)
    assert created.tags == tags

    fetched = await GalleryService.get_gallery_item_by_id(db, created.id)
    assert fetched.tags == tags

    page = await GalleryService.get_gallery_items(db)
    assert page.items[0].tags == tags

    updated = await GalleryService.update_gallery_item(db, created.id, GalleryItemUpdate(tags=["finals"]))
    assert updated.tags == ["finals"]


@pytest.mark.asyncio
async def test_missing_tags_read_as_empty_list(db, item_data):
    created = await _create_item(db, item_data)
    assert created.tags == []

    raw = await db.get(GalleryItem, created.id)
    assert raw.tags is None


@pytest.mark.asyncio
async def test_unrelated_update_keeps_tags(db, item_data):
    created = await _create_item(db, item_data, tags=["a", "b"])

    updated = await GalleryService.update_gallery_item(db, created.id, GalleryItemUpdate(title="Renamed"))

    assert updated.title == "Renamed"
    assert updated.tags == ["a", "b"]


@pytest.mark.asyncio
async def test_create_item_with_unknown_album_is_rejected(db, item_data):
    with pytest.raises(InvalidReferenceError) as exc_info:
        await _create_item(db, item_data, album_id="no-such-album")
    assert exc_info.value.field == "album_id"


@pytest.mark.asyncio
async def test_pagination_returns_newest_first(db, item_data):
    for n in range(5):
        await _create_item(db, item_data, title=f"Item {n}")

    first = await GalleryService.get_gallery_items(db, GalleryFilters(limit=2, offset=0))
    assert [item.title for item in first.items] == ["Item 4", "Item 3"]
    assert first.total == 5

    last = await GalleryService.get_gallery_items(db, GalleryFilters(limit=2, offset=4))
    assert [item.title for item in last.items] == ["Item 0"]
    assert last.total == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("limit,offset", [(0, 0), (10, 5), (3, 50)])
async def test_pagination_past_the_end_is_empty(db, item_data, limit, offset):
    for n in range(5):
        await _create_item(db, item_data, title=f"Item {n}")

    page = await GalleryService.get_gallery_items(db, GalleryFilters(limit=limit, offset=offset))

    assert len(page.items) == min(limit, max(0, 5 - offset))
    assert page.total == 5


@pytest.mark.asyncio
async def test_filters_apply_to_items_and_total(db, item_data):
    await _create_item(db, item_data, title="Relay", category="SPORTS")
    await _create_item(db, item_data, title="Choir", category="CULTURAL")
    await _create_item(db, item_data, title="Draft", category="SPORTS", is_published=False)

    page = await GalleryService.get_gallery_items(
        db, GalleryFilters(category="SPORTS", is_published=True)
    )

    assert [item.title for item in page.items] == ["Relay"]
    assert page.total == 1


@pytest.mark.asyncio
async def test_categories_are_distinct_and_stable(db, item_data):
    await _create_item(db, item_data, title="Relay", category="SPORTS")
    await _create_item(db, item_data, title="Prize giving", category="EVENTS")
    await _create_item(db, item_data, title="Netball", category="SPORTS")

    first = await GalleryService.get_gallery_categories(db)
    second = await GalleryService.get_gallery_categories(db)

    assert first == ["EVENTS", "SPORTS"]
    assert first == second


@pytest.mark.asyncio
async def test_update_missing_item_raises_not_found(db):
    with pytest.raises(NotFoundError):
        await GalleryService.update_gallery_item(db, "missing", GalleryItemUpdate(title="x"))


@pytest.mark.asyncio
async def test_delete_missing_item_raises_not_found(db):
    with pytest.raises(NotFoundError):
        await GalleryService.delete_gallery_item(db, "missing")


@pytest.mark.asyncio
async def test_deleting_a_cover_clears_the_album_cover(db, session_factory, item_data):
    album = await GalleryService.create_album(db, AlbumCreate(title="Athletics"))
    item = await _create_item(db, item_data, album_id=album.id)
    await GalleryService.update_album(db, album.id, AlbumUpdate(cover_image_id=item.id))

    await GalleryService.delete_gallery_item(db, item.id)

    async with session_factory() as fresh:
        stored = await fresh.get(Album, album.id)
        assert stored.cover_image_id is None
        assert await fresh.get(GalleryItem, item.id) is None


# ==================== Albums ====================

@pytest.mark.asyncio
async def test_duplicate_album_title_is_rejected(db):
    await GalleryService.create_album(db, AlbumCreate(title="Grade 4", album_type="CLASS", class_grade="4"))

    with pytest.raises(DuplicateAlbumError):
        await GalleryService.create_album(db, AlbumCreate(title="Grade 4", album_type="CLASS", class_grade="4"))

    other_grade = await GalleryService.create_album(
        db, AlbumCreate(title="Grade 4", album_type="CLASS", class_grade="5")
    )
    assert other_grade.class_grade == "5"


@pytest.mark.asyncio
async def test_cover_must_exist(db):
    with pytest.raises(InvalidReferenceError) as exc_info:
        await GalleryService.create_album(db, AlbumCreate(title="Trips", cover_image_id="missing"))
    assert exc_info.value.field == "cover_image_id"


@pytest.mark.asyncio
async def test_cover_from_another_album_is_rejected(db, item_data):
    first = await GalleryService.create_album(db, AlbumCreate(title="Choir"))
    second = await GalleryService.create_album(db, AlbumCreate(title="Orchestra"))
    item = await _create_item(db, item_data, album_id=first.id)

    with pytest.raises(InvalidReferenceError):
        await GalleryService.update_album(db, second.id, AlbumUpdate(cover_image_id=item.id))

    updated = await GalleryService.update_album(db, first.id, AlbumUpdate(cover_image_id=item.id))
    assert updated.cover_image_id == item.id


@pytest.mark.asyncio
async def test_list_albums_counts_items(db, item_data):
    full = await GalleryService.create_album(db, AlbumCreate(title="Sports"))
    await GalleryService.create_album(db, AlbumCreate(title="Empty"))
    await _create_item(db, item_data, title="One", album_id=full.id)
    await _create_item(db, item_data, title="Two", album_id=full.id)

    albums = {album.title: album for album in await GalleryService.list_albums(db)}

    assert albums["Sports"].item_count == 2
    assert albums["Empty"].item_count == 0


@pytest.mark.asyncio
async def test_album_detail_includes_items_and_cover(db, session_factory, item_data):
    album = await GalleryService.create_album(db, AlbumCreate(title="Sports"))
    item = await _create_item(db, item_data, album_id=album.id, tags=["track"])
    await GalleryService.update_album(db, album.id, AlbumUpdate(cover_image_id=item.id))

    async with session_factory() as fresh:
        detail = await GalleryService.get_album_by_id(fresh, album.id)

    assert detail.item_count == 1
    assert [i.id for i in detail.items] == [item.id]
    assert detail.cover_image.id == item.id
    assert detail.cover_image.tags == ["track"]


@pytest.mark.asyncio
async def test_delete_album_keeps_its_items(db, session_factory, item_data):
    album = await GalleryService.create_album(db, AlbumCreate(title="Sports"))
    item = await _create_item(db, item_data, album_id=album.id)

    await GalleryService.delete_album(db, album.id)

    async with session_factory() as fresh:
        assert await fresh.get(Album, album.id) is None
        kept = await fresh.get(GalleryItem, item.id)
        assert kept is not None
        assert kept.album_id is None


@pytest.mark.asyncio
async def test_missing_album_lookups(db):
    assert await GalleryService.get_album_by_id(db, "missing") is None
    with pytest.raises(NotFoundError):
        await GalleryService.update_album(db, "missing", AlbumUpdate(title="x"))
    with pytest.raises(NotFoundError):
        await GalleryService.delete_album(db, "missing")


@pytest.mark.asyncio
async def test_equal_timestamps_page_in_stable_order(db):
    taken = datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)
    for item_id in ("b", "d", "a", "c"):
        db.add(GalleryItem(
            id=item_id, title=f"Photo {item_id}", file_path=f"/uploads/{item_id}.webp",
            file_name=f"{item_id}.webp", original_name=f"{item_id}.jpg", file_size=1,
            mime_type="image/webp", created_at=taken,
        ))
    await db.commit()

    seen = []
    for offset in range(4):
        page = await GalleryService.get_gallery_items(db, GalleryFilters(limit=1, offset=offset))
        seen.extend(item.id for item in page.items)

    assert seen == ["d", "c", "b", "a"]


def test_update_schemas_reject_null_for_required_fields():
    with pytest.raises(ValidationError):
        GalleryItemUpdate(title=None)
    with pytest.raises(ValidationError):
        AlbumUpdate(album_type=None)

    assert GalleryItemUpdate(description=None).model_dump(exclude_unset=True) == {"description": None}
