from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from .schemas import ProtocolCreate, ProtocolResponse, ProtocolUpdate
from .service import ProtocolService

router = APIRouter(prefix="/protocols", tags=["Protocols"])


def get_protocol_service(db: Session = Depends(get_db)) -> ProtocolService:
    return ProtocolService(db)


@router.get("", response_model=list[ProtocolResponse])
async def get_protocols(
    category: Optional[str] = Query(None),
    include_inactive: bool = Query(True, alias="includeInactive"),
    current_user: User = Depends(require_staff),
    service: ProtocolService = Depends(get_protocol_service),
):
    return [
        ProtocolResponse.from_protocol(p)
        for p in service.get_protocols(current_user, category, include_inactive)
    ]


@router.get("/{protocol_id}", response_model=ProtocolResponse)
async def get_protocol(
    protocol_id: int,
    current_user: User = Depends(require_staff),
    service: ProtocolService = Depends(get_protocol_service),
):
    return ProtocolResponse.from_protocol(service.get_protocol(protocol_id, current_user))


@router.post("", response_model=ProtocolResponse, status_code=201)
async def create_protocol(
    data: ProtocolCreate,
    current_user: User = Depends(require_admin),
    service: ProtocolService = Depends(get_protocol_service),
):
    return ProtocolResponse.from_protocol(service.create_protocol(data, current_user))


@router.patch("/{protocol_id}", response_model=ProtocolResponse)
async def update_protocol(
    protocol_id: int,
    data: ProtocolUpdate,
    current_user: User = Depends(require_admin),
    service: ProtocolService = Depends(get_protocol_service),
):
    return ProtocolResponse.from_protocol(service.update_protocol(protocol_id, data, current_user))


@router.delete("/{protocol_id}")
async def delete_protocol(
    protocol_id: int,
    current_user: User = Depends(require_admin),
    service: ProtocolService = Depends(get_protocol_service),
):
    return service.delete_protocol(protocol_id, current_user)
