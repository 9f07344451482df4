"""
Gallery routes.
Public endpoints list published items and albums; write endpoints require the
admin password header. All data access goes through GalleryService.
"""
import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_cms.database import get_db
from school_cms.errors import DuplicateAlbumError, InvalidReferenceError, NotFoundError
from school_cms.schemas import (
    AlbumCreate,
    AlbumDetailResponse,
    AlbumResponse,
    AlbumType,
    AlbumUpdate,
    GalleryCategory,
    GalleryFilters,
    GalleryItemCreate,
    GalleryItemResponse,
    GalleryItemsPageResponse,
    GalleryItemType,
    GalleryItemUpdate,
    PaginationMetadata,
)
from school_cms.services.gallery_service import GalleryService
from school_cms.utils.auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gallery")


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": f"{e.entity} not found", "detail": str(e)}
    )


def _invalid_reference(e: InvalidReferenceError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "Validation failed", "details": [{"field": e.field, "message": e.message}]}
    )


def _server_error(message: str, e: Exception) -> HTTPException:
    logger.error(f"{message}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": message, "detail": str(e)}
    )


@router.get("", response_model=GalleryItemsPageResponse)
async def list_gallery_items(
    category: Optional[GalleryCategory] = None,
    type: Optional[GalleryItemType] = None,
    album_id: Optional[str] = None,
    is_published: bool = True,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a page of gallery items, newest first.

    Args:
        category: Only items in this category
        type: Only IMAGE or VIDEO items
        album_id: Only items in this album
        is_published: Published (default) or unpublished items
        page: 1-based page number
        limit: Page size (max 100)

    Returns:
        GalleryItemsPageResponse: Items plus page/limit/total/pages
    """
    try:
        filters = GalleryFilters(
            category=category,
            type=type,
            album_id=album_id,
            is_published=is_published,
            limit=limit,
            offset=(page - 1) * limit,
        )
        result = await GalleryService.get_gallery_items(db, filters)

        logger.info(f"Retrieved {len(result.items)} of {result.total} gallery items (page {page})")

        return GalleryItemsPageResponse(
            items=result.items,
            pagination=PaginationMetadata(
                page=page,
                limit=limit,
                total=result.total,
                pages=math.ceil(result.total / limit),
            )
        )
    except Exception as e:
        raise _server_error("Failed to retrieve gallery items", e)


@router.get("/categories", response_model=List[str])
async def list_gallery_categories(db: AsyncSession = Depends(get_db)):
    """Categories that currently have at least one gallery item."""
    try:
        return await GalleryService.get_gallery_categories(db)
    except Exception as e:
        raise _server_error("Failed to retrieve gallery categories", e)


@router.get("/albums", response_model=List[AlbumResponse])
async def list_albums(
    album_type: Optional[AlbumType] = None,
    class_grade: Optional[str] = None,
    is_published: Optional[bool] = True,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await GalleryService.list_albums(
            db,
            album_type=album_type.value if album_type else None,
            class_grade=class_grade,
            is_published=is_published,
        )
    except Exception as e:
        raise _server_error("Failed to retrieve albums", e)


@router.get("/albums/{album_id}", response_model=AlbumDetailResponse)
async def get_album(album_id: str, db: AsyncSession = Depends(get_db)):
    """Published album with its items. Unpublished albums read as not found."""
    try:
        album = await GalleryService.get_album_by_id(db, album_id)
        if album is None or not album.is_published:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "Album not found", "detail": f"Album {album_id} does not exist"}
            )
        return album
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Failed to retrieve album", e)


@router.post("/albums", response_model=AlbumResponse, status_code=status.HTTP_201_CREATED)
async def create_album(
    album_in: AlbumCreate,
    db: AsyncSession = Depends(get_db),
    authorized: bool = Depends(require_admin)
):
    """
    Create an album. Requires the admin password.

    Raises:
        HTTPException: 400 for a bad cover reference, 409 for a duplicate title
    """
    try:
        return await GalleryService.create_album(db, album_in)
    except InvalidReferenceError as e:
        raise _invalid_reference(e)
    except DuplicateAlbumError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": "Duplicate album", "detail": str(e)}
        )
    except Exception as e:
        await db.rollback()
        raise _server_error("Failed to create album", e)


@router.put("/albums/{album_id}", response_model=AlbumResponse)
async def update_album(
    album_id: str,
    album_update: AlbumUpdate,
    db: AsyncSession = Depends(get_db),
    authorized: bool = Depends(require_admin)
):
    try:
        return await GalleryService.update_album(db, album_id, album_update)
    except NotFoundError as e:
        raise _not_found(e)
    except InvalidReferenceError as e:
        raise _invalid_reference(e)
    except Exception as e:
        await db.rollback()
        raise _server_error("Failed to update album", e)


@router.delete("/albums/{album_id}")
async def delete_album(
    album_id: str,
    db: AsyncSession = Depends(get_db),
    authorized: bool = Depends(require_admin)
):
    try:
        await GalleryService.delete_album(db, album_id)
        return {"message": "Album deleted successfully", "album_id": album_id}
    except NotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        await db.rollback()
        raise _server_error("Failed to delete album", e)


@router.get("/{item_id}", response_model=GalleryItemResponse)
async def get_gallery_item(item_id: str, db: AsyncSession = Depends(get_db)):
    """Single published gallery item. Unpublished items read as not found."""
    try:
        item = await GalleryService.get_gallery_item_by_id(db, item_id)
        if item is None or not item.is_published:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": "Gallery item not found", "detail": f"Gallery item {item_id} does not exist"}
            )
        return item
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Failed to retrieve gallery item", e)


@router.post("", response_model=GalleryItemResponse, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    item_in: GalleryItemCreate,
    db: AsyncSession = Depends(get_db),
    authorized: bool = Depends(require_admin)
):
    """
    Register a gallery item for a file the upload flow has stored.
    Requires the admin password.
    """
    try:
        return await GalleryService.create_gallery_item(db, item_in)
    except InvalidReferenceError as e:
        raise _invalid_reference(e)
    except Exception as e:
        await db.rollback()
        raise _server_error("Failed to create gallery item", e)


@router.put("/{item_id}", response_model=GalleryItemResponse)
async def update_gallery_item(
    item_id: str,
    item_update: GalleryItemUpdate,
    db: AsyncSession = Depends(get_db),
    authorized: bool = Depends(require_admin)
):
    try:
        return await GalleryService.update_gallery_item(db, item_id, item_update)
    except NotFoundError as e:
        raise _not_found(e)
    except InvalidReferenceError as e:
        raise _invalid_reference(e)
    except Exception as e:
        await db.rollback()
        raise _server_error("Failed to update gallery item", e)


@router.delete("/{item_id}")
async def delete_gallery_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    authorized: bool = Depends(require_admin)
):
    try:
        await GalleryService.delete_gallery_item(db, item_id)
        return {"message": "Gallery item deleted successfully", "item_id": item_id}
    except NotFoundError as e:
        raise _not_found(e)
    except Exception as e:
        await db.rollback()
        raise _server_error("Failed to delete gallery item", e)
