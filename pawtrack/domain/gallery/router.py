from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_staff
from ...database import get_db
from ...models import User
from ...rate_limiter import rate_limit_public
from .schemas import (
    GalleryDayCreate,
    GalleryDayResponse,
    GalleryItemCreate,
    GalleryItemResponse,
    PublicGalleryResponse,
)
from .service import GalleryService

router = APIRouter(tags=["Gallery"])


def get_gallery_service(db: Session = Depends(get_db)) -> GalleryService:
    return GalleryService(db)


@router.get("/gallery", response_model=list[GalleryDayResponse])
async def get_gallery_days(
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return [GalleryDayResponse.from_day(d, include_items=False) for d in service.get_days(current_user)]


@router.post("/gallery", response_model=GalleryDayResponse, status_code=201)
async def create_gallery_day(
    data: GalleryDayCreate,
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return GalleryDayResponse.from_day(service.create_day(data, current_user))


@router.get("/gallery/{day_id}", response_model=GalleryDayResponse)
async def get_gallery_day(
    day_id: int,
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return GalleryDayResponse.from_day(service.get_day(day_id, current_user))


@router.delete("/gallery/{day_id}")
async def delete_gallery_day(
    day_id: int,
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return service.delete_day(day_id, current_user)


@router.get("/gallery/{day_id}/items", response_model=list[GalleryItemResponse])
async def get_gallery_items(
    day_id: int,
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return [GalleryItemResponse.from_item(i) for i in service.get_items(day_id, current_user)]


@router.post("/gallery/{day_id}/items", response_model=GalleryItemResponse, status_code=201)
async def add_gallery_item(
    day_id: int,
    data: GalleryItemCreate,
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return GalleryItemResponse.from_item(service.add_item(day_id, data, current_user))


@router.delete("/gallery/items/{item_id}")
async def delete_gallery_item(
    item_id: int,
    current_user: User = Depends(require_staff),
    service: GalleryService = Depends(get_gallery_service),
):
    return service.delete_item(item_id, current_user)


# Public share link - no authentication
@router.get("/public/gallery/{slug}", response_model=PublicGalleryResponse)
async def get_public_gallery(
    slug: str,
    _: None = Depends(rate_limit_public),
    service: GalleryService = Depends(get_gallery_service),
):
    return service.get_public_day(slug)
