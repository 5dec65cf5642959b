"""
Gallery service - dated photo/video albums shared with clients.

Each day gets an unguessable slug so it can be opened without an account.
"""

import logging
import secrets

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...models_gallery import GalleryDay, GalleryItem
from ...security_utils import sanitize_text
from ...shared.validators import slugify
from ...utils.storage import get_storage, validate_owned_key
from .repository import GalleryRepository
from .schemas import (
    GalleryDayCreate,
    GalleryItemCreate,
    GalleryItemResponse,
    PublicGalleryResponse,
)

logger = logging.getLogger(__name__)


def build_slug(title: str, day) -> str:
    return f"{slugify(title, 'gallery')}-{day.isoformat()}-{secrets.token_hex(3)}"


class GalleryService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = GalleryRepository()

    # ========================================================================
    # DAYS
    # ========================================================================

    def get_days(self, user: User) -> list[GalleryDay]:
        return self.repo.get_days(self.db, user.business_id)

    def get_day(self, day_id: int, user: User) -> GalleryDay:
        day = self.repo.get_day(self.db, day_id, user.business_id)
        if not day:
            raise HTTPException(status_code=404, detail="Gallery day not found")
        return day

    def create_day(self, data: GalleryDayCreate, user: User) -> GalleryDay:
        slug = build_slug(data.title, data.date)
        while self.repo.slug_exists(self.db, slug):
            slug = build_slug(data.title, data.date)

        day = self.repo.save(
            self.db,
            GalleryDay(
                business_id=user.business_id,
                title=sanitize_text(data.title),
                description=sanitize_text(data.description),
                date=data.date,
                slug=slug,
                cover_image_key=validate_owned_key(data.coverImageKey, user.business_id),
                created_by=user.id,
            ),
        )
        logger.info(f"🖼️ Gallery day {day.id} created: {day.slug}")
        return day

    def delete_day(self, day_id: int, user: User) -> dict:
        day = self.get_day(day_id, user)
        keys = [item.file_key for item in day.items]
        if day.cover_image_key:
            keys.append(day.cover_image_key)
        self.repo.delete(self.db, day)

        storage = get_storage()
        for key in keys:
            storage.delete(key)
        logger.info(f"🗑️ Gallery day {day_id} deleted with {len(keys)} stored object(s)")
        return {"message": "Gallery day deleted"}

    # ========================================================================
    # ITEMS
    # ========================================================================

    def get_items(self, day_id: int, user: User) -> list[GalleryItem]:
        day = self.get_day(day_id, user)
        return self.repo.get_items(self.db, day.id)

    def add_item(self, day_id: int, data: GalleryItemCreate, user: User) -> GalleryItem:
        day = self.get_day(day_id, user)
        sort_order = data.sortOrder
        if sort_order is None:
            sort_order = self.repo.next_sort_order(self.db, day.id)
        item = self.repo.save(
            self.db,
            GalleryItem(
                day_id=day.id,
                media_type=data.mediaType,
                file_key=validate_owned_key(data.fileKey, user.business_id),
                caption=sanitize_text(data.caption),
                sort_order=sort_order,
            ),
        )
        logger.info(f"🖼️ {item.media_type} added to gallery day {day.id}")
        return item

    def delete_item(self, item_id: int, user: User) -> dict:
        item = self.repo.get_item(self.db, item_id, user.business_id)
        if not item:
            raise HTTPException(status_code=404, detail="Gallery item not found")
        file_key = item.file_key
        self.repo.delete(self.db, item)
        get_storage().delete(file_key)
        return {"message": "Gallery item deleted"}

    # ========================================================================
    # PUBLIC
    # ========================================================================

    def get_public_day(self, slug: str) -> PublicGalleryResponse:
        day = self.repo.get_day_by_slug(self.db, slug)
        if not day:
            raise HTTPException(status_code=404, detail="Gallery not found")
        business = self.repo.get_business(self.db, day.business_id)
        return PublicGalleryResponse(
            title=day.title,
            description=day.description,
            date=day.date,
            businessName=business.name if business else None,
            coverImageUrl=get_storage().url(day.cover_image_key),
            items=[GalleryItemResponse.from_item(i) for i in day.items],
        )
