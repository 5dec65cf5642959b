"""Client router - FastAPI endpoints for client operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from ...utils.storage import get_storage
from .schemas import (
    ClientCreate,
    ClientDogSummary,
    ClientResponse,
    ClientUpdate,
    ClientWithDogsResponse,
)
from .service import ClientService

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


@router.get("", response_model=list[ClientResponse])
async def get_clients(
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_staff),
    service: ClientService = Depends(get_client_service),
):
    return [ClientResponse.from_client(c) for c in service.get_clients(current_user, search)]


@router.get("/with-dogs", response_model=list[ClientWithDogsResponse])
async def get_clients_with_dogs(
    current_user: User = Depends(require_staff),
    service: ClientService = Depends(get_client_service),
):
    """Clients with their dogs, for pickers and the records overview"""
    storage = get_storage()
    return [
        ClientWithDogsResponse(
            **ClientResponse.from_client(c).model_dump(),
            dogs=[
                ClientDogSummary(
                    id=d.id,
                    name=d.name,
                    breed=d.breed,
                    petTypeName=d.pet_type_name,
                    imageUrl=storage.url(d.image_key),
                )
                for d in c.dogs
            ],
        )
        for c in service.get_clients_with_dogs(current_user)
    ]


@router.get("/export")
async def export_clients_csv(
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    return service.export_clients_csv(current_user, search)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    current_user: User = Depends(require_staff),
    service: ClientService = Depends(get_client_service),
):
    return ClientResponse.from_client(service.get_client(client_id, current_user))


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: User = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    return ClientResponse.from_client(service.create_client(data, current_user))


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    current_user: User = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    return ClientResponse.from_client(service.update_client(client_id, data, current_user))


@router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    current_user: User = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    return service.delete_client(client_id, current_user)
