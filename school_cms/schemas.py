"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints and the data transfer snapshot.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_cms.utils.tags import deserialize_tags


def _not_null(v):
    # These columns are NOT NULL; omit the field to leave it unchanged
    if v is None:
        raise ValueError("Field may be omitted but not set to null")
    return v


class GalleryCategory(str, Enum):
    EVENTS = "EVENTS"
    SPORTS = "SPORTS"
    ACADEMIC = "ACADEMIC"
    CULTURAL = "CULTURAL"
    GENERAL = "GENERAL"
    CLASS_PHOTOS = "CLASS_PHOTOS"


class GalleryItemType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class AlbumType(str, Enum):
    GENERAL = "GENERAL"
    CLASS = "CLASS"


class GalleryItemCreate(BaseModel):
    """
    Request schema for registering a gallery item.
    File fields describe a file the upload flow has already stored.
    """
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: GalleryCategory = GalleryCategory.GENERAL
    type: GalleryItemType = GalleryItemType.IMAGE
    file_path: str = Field(min_length=1)
    file_name: str = Field(min_length=1)
    original_name: str = Field(min_length=1)
    file_size: int = Field(ge=0)
    mime_type: str = Field(min_length=1)
    tags: Optional[List[str]] = None
    is_published: bool = True
    uploaded_by: Optional[str] = None
    album_id: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


class GalleryItemUpdate(BaseModel):
    """
    Request schema for partial gallery item updates.
    Only fields present in the request are applied.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[GalleryCategory] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None
    album_id: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("title", "category", "is_published", mode="before")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)


class GalleryItemResponse(BaseModel):
    """Gallery item with its tags decoded into a list."""
    id: str
    title: str
    description: Optional[str] = None
    category: str
    type: str
    file_path: str
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    tags: List[str] = []
    is_published: bool
    uploaded_by: Optional[str] = None
    album_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def decode_tags(cls, v):
        return deserialize_tags(v)


class GalleryFilters(BaseModel):
    """Listing filters; unset filters match everything."""
    category: Optional[GalleryCategory] = None
    type: Optional[GalleryItemType] = None
    is_published: Optional[bool] = None
    album_id: Optional[str] = None
    limit: int = Field(default=50, ge=0)
    offset: int = Field(default=0, ge=0)

    model_config = ConfigDict(use_enum_values=True)


class GalleryItemsPage(BaseModel):
    items: List[GalleryItemResponse]
    total: int


class PaginationMetadata(BaseModel):
    """
    Page-number pagination metadata.
    """
    page: int
    limit: int
    total: int
    pages: int


class GalleryItemsPageResponse(BaseModel):
    """
    Paginated response for GET /api/gallery.
    """
    items: List[GalleryItemResponse]
    pagination: PaginationMetadata


class AlbumCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    album_type: AlbumType = AlbumType.GENERAL
    class_grade: Optional[str] = None
    cover_image_id: Optional[str] = None
    is_published: bool = True

    model_config = ConfigDict(use_enum_values=True)


class AlbumUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    album_type: Optional[AlbumType] = None
    class_grade: Optional[str] = None
    cover_image_id: Optional[str] = None
    is_published: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("title", "album_type", "is_published", mode="before")
    @classmethod
    def reject_null(cls, v):
        return _not_null(v)


class AlbumResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    album_type: str
    class_grade: Optional[str] = None
    cover_image_id: Optional[str] = None
    is_published: bool
    item_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlbumDetailResponse(AlbumResponse):
    """Album with its items and cover image."""
    items: List[GalleryItemResponse] = []
    cover_image: Optional[GalleryItemResponse] = None


class ExportPayload(BaseModel):
    """
    Snapshot document written by the export tool and read by the import tool.
    Field names on disk are camelCase (exportedAt, counts, data).
    """
    exported_at: datetime = Field(alias="exportedAt")
    counts: Dict[str, int] = {}
    data: Dict[str, List[Dict[str, Any]]] = {}

    model_config = ConfigDict(populate_by_name=True)

    @property
    def total_records(self) -> int:
        return sum(self.counts.values())
