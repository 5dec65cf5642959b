from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ... import config
from ...models_gallery import MEDIA_TYPES, GalleryDay, GalleryItem
from ...shared.validators import validate_choice, validate_required_text
from ...utils.storage import get_storage


class GalleryDayCreate(BaseModel):
    title: str
    description: Optional[str] = None
    date: date
    coverImageKey: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required_text(v, "Title")


class GalleryItemCreate(BaseModel):
    mediaType: str
    fileKey: str
    caption: Optional[str] = None
    sortOrder: Optional[int] = None

    @field_validator("mediaType")
    @classmethod
    def check_media_type(cls, v):
        return validate_choice(v, MEDIA_TYPES, "Media type")

    @field_validator("fileKey")
    @classmethod
    def check_file_key(cls, v):
        return validate_required_text(v, "File key")


class GalleryItemResponse(BaseModel):
    id: int
    dayId: int
    mediaType: str
    fileKey: str
    url: Optional[str] = None
    caption: Optional[str] = None
    sortOrder: int

    @classmethod
    def from_item(cls, item: GalleryItem) -> "GalleryItemResponse":
        return cls(
            id=item.id,
            dayId=item.day_id,
            mediaType=item.media_type,
            fileKey=item.file_key,
            url=get_storage().url(item.file_key),
            caption=item.caption,
            sortOrder=item.sort_order,
        )


class GalleryDayResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    date: date
    slug: str
    shareUrl: str
    coverImageKey: Optional[str] = None
    coverImageUrl: Optional[str] = None
    itemCount: int = 0
    items: list[GalleryItemResponse] = []
    createdAt: Optional[datetime] = None

    @classmethod
    def from_day(cls, day: GalleryDay, include_items: bool = True) -> "GalleryDayResponse":
        return cls(
            id=day.id,
            title=day.title,
            description=day.description,
            date=day.date,
            slug=day.slug,
            shareUrl=f"{config.FRONTEND_URL.rstrip('/')}/gallery/{day.slug}",
            coverImageKey=day.cover_image_key,
            coverImageUrl=get_storage().url(day.cover_image_key),
            itemCount=len(day.items),
            items=[GalleryItemResponse.from_item(i) for i in day.items] if include_items else [],
            createdAt=day.created_at,
        )


class PublicGalleryResponse(BaseModel):
    """What an anonymous visitor sees through a shared link"""

    title: str
    description: Optional[str] = None
    date: date
    businessName: Optional[str] = None
    coverImageUrl: Optional[str] = None
    items: list[GalleryItemResponse] = []
