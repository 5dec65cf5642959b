from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from .schemas import (
    ConsumeSessionRequest,
    ConsumeSessionResponse,
    PackageCreate,
    PackageResponse,
    PackageSessionResponse,
    PackageUpdate,
)
from .service import PackageService

router = APIRouter(prefix="/packages", tags=["Packages"])


def get_package_service(db: Session = Depends(get_db)) -> PackageService:
    return PackageService(db)


@router.get("", response_model=list[PackageResponse])
async def get_packages(
    client_id: Optional[int] = Query(None, alias="clientId"),
    status: Optional[str] = Query(None),
    current_user: User = Depends(require_staff),
    service: PackageService = Depends(get_package_service),
):
    return [
        PackageResponse.from_package(p)
        for p in service.get_packages(current_user, client_id, status)
    ]


@router.get("/{package_id}", response_model=PackageResponse)
async def get_package(
    package_id: int,
    current_user: User = Depends(require_staff),
    service: PackageService = Depends(get_package_service),
):
    return PackageResponse.from_package(service.get_package(package_id, current_user))


@router.post("", response_model=PackageResponse, status_code=201)
async def create_package(
    data: PackageCreate,
    current_user: User = Depends(require_admin),
    service: PackageService = Depends(get_package_service),
):
    return PackageResponse.from_package(service.create_package(data, current_user))


@router.patch("/{package_id}", response_model=PackageResponse)
async def update_package(
    package_id: int,
    data: PackageUpdate,
    current_user: User = Depends(require_admin),
    service: PackageService = Depends(get_package_service),
):
    return PackageResponse.from_package(service.update_package(package_id, data, current_user))


@router.delete("/{package_id}")
async def delete_package(
    package_id: int,
    current_user: User = Depends(require_admin),
    service: PackageService = Depends(get_package_service),
):
    return service.delete_package(package_id, current_user)


@router.post("/{package_id}/consume", response_model=ConsumeSessionResponse)
async def consume_session(
    package_id: int,
    data: ConsumeSessionRequest,
    current_user: User = Depends(require_staff),
    service: PackageService = Depends(get_package_service),
):
    """Mark one session of the package as attended"""
    package, session = service.consume_session(package_id, data, current_user)
    return ConsumeSessionResponse(
        package=PackageResponse.from_package(package),
        session=PackageSessionResponse.from_session(session),
    )


@router.get("/{package_id}/sessions", response_model=list[PackageSessionResponse])
async def get_package_sessions(
    package_id: int,
    current_user: User = Depends(require_staff),
    service: PackageService = Depends(get_package_service),
):
    return [
        PackageSessionResponse.from_session(s)
        for s in service.get_sessions(package_id, current_user)
    ]
