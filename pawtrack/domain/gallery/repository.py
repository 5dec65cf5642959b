from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import Business
from ...models_gallery import GalleryDay, GalleryItem


class GalleryRepository:
    @staticmethod
    def get_days(db: Session, business_id: int) -> list[GalleryDay]:
        return (
            db.query(GalleryDay)
            .options(selectinload(GalleryDay.items))
            .filter(GalleryDay.business_id == business_id)
            .order_by(GalleryDay.date.desc(), GalleryDay.id.desc())
            .all()
        )

    @staticmethod
    def get_day(db: Session, day_id: int, business_id: int) -> Optional[GalleryDay]:
        return (
            db.query(GalleryDay)
            .options(selectinload(GalleryDay.items))
            .filter(GalleryDay.id == day_id, GalleryDay.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_day_by_slug(db: Session, slug: str) -> Optional[GalleryDay]:
        return (
            db.query(GalleryDay)
            .options(selectinload(GalleryDay.items))
            .filter(GalleryDay.slug == slug)
            .first()
        )

    @staticmethod
    def slug_exists(db: Session, slug: str) -> bool:
        return db.query(GalleryDay.id).filter(GalleryDay.slug == slug).first() is not None

    @staticmethod
    def get_business(db: Session, business_id: int) -> Optional[Business]:
        return db.query(Business).filter(Business.id == business_id).first()

    @staticmethod
    def get_item(db: Session, item_id: int, business_id: int) -> Optional[GalleryItem]:
        return (
            db.query(GalleryItem)
            .join(GalleryDay, GalleryItem.day_id == GalleryDay.id)
            .filter(GalleryItem.id == item_id, GalleryDay.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_items(db: Session, day_id: int) -> list[GalleryItem]:
        return (
            db.query(GalleryItem)
            .filter(GalleryItem.day_id == day_id)
            .order_by(GalleryItem.sort_order, GalleryItem.id)
            .all()
        )

    @staticmethod
    def next_sort_order(db: Session, day_id: int) -> int:
        highest = (
            db.query(func.max(GalleryItem.sort_order))
            .filter(GalleryItem.day_id == day_id)
            .scalar()
        )
        return 0 if highest is None else highest + 1

    @staticmethod
    def save(db: Session, obj):
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def delete(db: Session, obj) -> None:
        db.delete(obj)
        db.commit()
