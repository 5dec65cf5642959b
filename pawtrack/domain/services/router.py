from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def get_services(
    include_inactive: bool = Query(False, alias="includeInactive"),
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return [
        ServiceResponse.from_service(s)
        for s in service.get_services(current_user, include_inactive)
    ]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceResponse.from_service(service.get_service(service_id, current_user))


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceResponse.from_service(service.create_service(data, current_user))


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceResponse.from_service(service.update_service(service_id, data, current_user))


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    current_user: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id, current_user)
