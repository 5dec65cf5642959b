from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

MEDIA_TYPES = ("image", "video")


class GalleryDay(Base):
    """Dated album shared publicly through its slug"""

    __tablename__ = "gallery_days"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    cover_image_key = Column(String(500), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "GalleryItem",
        back_populates="day",
        cascade="all, delete",
        order_by="GalleryItem.sort_order",
    )


class GalleryItem(Base):
    __tablename__ = "gallery_items"

    id = Column(Integer, primary_key=True, index=True)
    day_id = Column(Integer, ForeignKey("gallery_days.id"), nullable=False, index=True)
    media_type = Column(String(10), nullable=False)  # image, video
    file_key = Column(String(500), nullable=False)
    caption = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    day = relationship("GalleryDay", back_populates="items")
