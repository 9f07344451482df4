"""
Gallery data-access layer.
CRUD over gallery items and albums. Tags are serialized on every write and
decoded on every read (GalleryItemResponse runs the decoder).
"""
import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_cms.errors import DuplicateAlbumError, InvalidReferenceError, NotFoundError
from school_cms.models import Album, GalleryItem
from school_cms.schemas import (
    AlbumCreate,
    AlbumDetailResponse,
    AlbumResponse,
    AlbumUpdate,
    GalleryFilters,
    GalleryItemCreate,
    GalleryItemResponse,
    GalleryItemsPage,
    GalleryItemUpdate,
)
from school_cms.utils.tags import serialize_tags

logger = logging.getLogger(__name__)


class GalleryService:
    """Gallery items and albums. Every method takes the session as its first argument."""

    # ==================== Gallery items ====================

    @staticmethod
    async def create_gallery_item(db: AsyncSession, data: GalleryItemCreate) -> GalleryItemResponse:
        """
        Persist a gallery item whose file has already been stored.

        Raises:
            InvalidReferenceError: If album_id names an album that does not exist
        """
        if data.album_id and await db.get(Album, data.album_id) is None:
            raise InvalidReferenceError("album_id", f"Album {data.album_id} does not exist")

        values = data.model_dump(exclude={"tags"})
        item = GalleryItem(**values, tags=serialize_tags(data.tags))
        db.add(item)
        await db.commit()
        await db.refresh(item)

        logger.info(f"Created gallery item {item.id} ({item.type}, {item.category})")
        return GalleryItemResponse.model_validate(item)

    @staticmethod
    async def get_gallery_items(
        db: AsyncSession,
        filters: Optional[GalleryFilters] = None,
    ) -> GalleryItemsPage:
        """
        List gallery items newest first.

        Returns:
            GalleryItemsPage: The requested page plus the total matching count
        """
        filters = filters or GalleryFilters()

        conditions = []
        if filters.category:
            conditions.append(GalleryItem.category == filters.category)
        if filters.type:
            conditions.append(GalleryItem.type == filters.type)
        if filters.is_published is not None:
            conditions.append(GalleryItem.is_published == filters.is_published)
        if filters.album_id:
            conditions.append(GalleryItem.album_id == filters.album_id)

        query = (
            select(GalleryItem)
            .where(*conditions)
            .order_by(GalleryItem.created_at.desc(), GalleryItem.id.desc())
            .limit(filters.limit)
            .offset(filters.offset)
        )
        count_query = select(func.count(GalleryItem.id)).where(*conditions)

        items = (await db.execute(query)).scalars().all()
        total = (await db.execute(count_query)).scalar() or 0

        return GalleryItemsPage(
            items=[GalleryItemResponse.model_validate(item) for item in items],
            total=total,
        )

    @staticmethod
    async def get_gallery_item_by_id(db: AsyncSession, item_id: str) -> Optional[GalleryItemResponse]:
        item = await db.get(GalleryItem, item_id)
        if item is None:
            return None
        return GalleryItemResponse.model_validate(item)

    @staticmethod
    async def update_gallery_item(
        db: AsyncSession,
        item_id: str,
        data: GalleryItemUpdate,
    ) -> GalleryItemResponse:
        """
        Apply a partial update. Only fields set on `data` are written.

        Raises:
            NotFoundError: If the item does not exist
            InvalidReferenceError: If album_id names an album that does not exist
        """
        item = await db.get(GalleryItem, item_id)
        if item is None:
            raise NotFoundError("Gallery item", item_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("album_id") and await db.get(Album, changes["album_id"]) is None:
            raise InvalidReferenceError("album_id", f"Album {changes['album_id']} does not exist")

        if "tags" in changes:
            changes["tags"] = serialize_tags(changes["tags"])

        for field, value in changes.items():
            setattr(item, field, value)

        await db.commit()
        await db.refresh(item)

        logger.info(f"Updated gallery item {item_id}: {', '.join(changes) or 'no changes'}")
        return GalleryItemResponse.model_validate(item)

    @staticmethod
    async def delete_gallery_item(db: AsyncSession, item_id: str) -> None:
        """
        Delete a gallery item. Albums using it as their cover lose the cover.

        Raises:
            NotFoundError: If the item does not exist
        """
        item = await db.get(GalleryItem, item_id)
        if item is None:
            raise NotFoundError("Gallery item", item_id)

        await db.execute(
            update(Album)
            .where(Album.cover_image_id == item_id)
            .values(cover_image_id=None)
        )
        await db.delete(item)
        await db.commit()

        logger.info(f"Deleted gallery item {item_id}")

    @staticmethod
    async def get_gallery_categories(db: AsyncSession) -> List[str]:
        """Distinct categories currently in use, sorted."""
        result = await db.execute(
            select(GalleryItem.category).distinct().order_by(GalleryItem.category)
        )
        return list(result.scalars().all())

    # ==================== Albums ====================

    @staticmethod
    async def create_album(db: AsyncSession, data: AlbumCreate) -> AlbumResponse:
        """
        Raises:
            DuplicateAlbumError: If an album with the same title, type and grade exists
            InvalidReferenceError: If the cover image is missing or in another album
        """
        existing = await db.execute(
            select(Album.id).where(
                Album.title == data.title,
                Album.album_type == data.album_type,
                Album.class_grade.is_(None) if data.class_grade is None else Album.class_grade == data.class_grade,
            )
        )
        if existing.first() is not None:
            raise DuplicateAlbumError(data.title)

        if data.cover_image_id:
            await GalleryService._check_cover(db, data.cover_image_id, album_id=None)

        album = Album(**data.model_dump())
        db.add(album)
        await db.commit()
        await db.refresh(album)

        logger.info(f"Created album {album.id} ({album.title})")
        return AlbumResponse.model_validate(album)

    @staticmethod
    async def list_albums(
        db: AsyncSession,
        album_type: Optional[str] = None,
        class_grade: Optional[str] = None,
        is_published: Optional[bool] = None,
    ) -> List[AlbumResponse]:
        """Albums newest first, each with the number of items it holds."""
        item_count = (
            select(func.count(GalleryItem.id))
            .where(GalleryItem.album_id == Album.id)
            .correlate(Album)
            .scalar_subquery()
        )

        conditions = []
        if album_type:
            conditions.append(Album.album_type == album_type)
        if class_grade:
            conditions.append(Album.class_grade == class_grade)
        if is_published is not None:
            conditions.append(Album.is_published == is_published)

        result = await db.execute(
            select(Album, item_count.label("item_count"))
            .where(*conditions)
            .order_by(Album.created_at.desc(), Album.id.desc())
        )
        return [
            AlbumResponse.model_validate(album).model_copy(update={"item_count": count})
            for album, count in result.all()
        ]

    @staticmethod
    async def get_album_by_id(db: AsyncSession, album_id: str) -> Optional[AlbumDetailResponse]:
        result = await db.execute(
            select(Album)
            .where(Album.id == album_id)
            .options(selectinload(Album.items), selectinload(Album.cover_image))
        )
        album = result.scalar_one_or_none()
        if album is None:
            return None

        detail = AlbumDetailResponse.model_validate(album)
        return detail.model_copy(update={"item_count": len(detail.items)})

    @staticmethod
    async def update_album(db: AsyncSession, album_id: str, data: AlbumUpdate) -> AlbumResponse:
        """
        Raises:
            NotFoundError: If the album does not exist
            InvalidReferenceError: If the new cover image is missing or in another album
        """
        album = await db.get(Album, album_id)
        if album is None:
            raise NotFoundError("Album", album_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("cover_image_id"):
            await GalleryService._check_cover(db, changes["cover_image_id"], album_id=album_id)

        for field, value in changes.items():
            setattr(album, field, value)

        await db.commit()
        await db.refresh(album)

        logger.info(f"Updated album {album_id}: {', '.join(changes) or 'no changes'}")
        return AlbumResponse.model_validate(album)

    @staticmethod
    async def delete_album(db: AsyncSession, album_id: str) -> None:
        """
        Delete an album. Its items stay in the gallery without an album.

        Raises:
            NotFoundError: If the album does not exist
        """
        album = await db.get(Album, album_id)
        if album is None:
            raise NotFoundError("Album", album_id)

        await db.execute(
            update(GalleryItem)
            .where(GalleryItem.album_id == album_id)
            .values(album_id=None)
        )
        await db.delete(album)
        await db.commit()

        logger.info(f"Deleted album {album_id}")

    @staticmethod
    async def _check_cover(db: AsyncSession, cover_image_id: str, album_id: Optional[str]) -> None:
        cover = await db.get(GalleryItem, cover_image_id)
        if cover is None:
            raise InvalidReferenceError("cover_image_id", f"Gallery item {cover_image_id} does not exist")
        if cover.album_id is not None and cover.album_id != album_id:
            raise InvalidReferenceError(
                "cover_image_id",
                f"Gallery item {cover_image_id} belongs to another album",
            )
