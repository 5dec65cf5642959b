"""Pet router - pet types, dogs, dog photos and complete records"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from .schemas import (
    DogCreate,
    DogRecordResponse,
    DogResponse,
    DogUpdate,
    PetTypeCreate,
    PetTypeResponse,
)
from .service import PetService

router = APIRouter(tags=["Pets"])


def get_pet_service(db: Session = Depends(get_db)) -> PetService:
    return PetService(db)


@router.get("/pet-types", response_model=list[PetTypeResponse])
async def get_pet_types(
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    return [PetTypeResponse.from_pet_type(p) for p in service.get_pet_types(current_user)]


@router.post("/pet-types", response_model=PetTypeResponse, status_code=201)
async def create_pet_type(
    data: PetTypeCreate,
    current_user: User = Depends(require_admin),
    service: PetService = Depends(get_pet_service),
):
    return PetTypeResponse.from_pet_type(service.create_pet_type(data, current_user))


@router.get("/dogs", response_model=list[DogResponse])
async def get_dogs(
    client_id: Optional[int] = Query(None, alias="clientId"),
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    return [DogResponse.from_dog(d) for d in service.get_dogs(current_user, client_id)]


@router.get("/clients/{client_id}/dogs", response_model=list[DogResponse])
async def get_client_dogs(
    client_id: int,
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    return [DogResponse.from_dog(d) for d in service.get_dogs_by_client(client_id, current_user)]


@router.get("/dogs/{dog_id}", response_model=DogResponse)
async def get_dog(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    return DogResponse.from_dog(service.get_dog(dog_id, current_user))


@router.get("/dogs/{dog_id}/record", response_model=DogRecordResponse)
async def get_dog_record(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    return service.complete_record(dog_id, current_user)


@router.post("/dogs", response_model=DogResponse, status_code=201)
async def create_dog(
    data: DogCreate,
    current_user: User = Depends(require_admin),
    service: PetService = Depends(get_pet_service),
):
    return DogResponse.from_dog(service.create_dog(data, current_user))


@router.patch("/dogs/{dog_id}", response_model=DogResponse)
async def update_dog(
    dog_id: int,
    data: DogUpdate,
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    """Admins edit any field; teachers only notes and image"""
    return DogResponse.from_dog(service.update_dog(dog_id, data, current_user))


@router.post("/dogs/{dog_id}/image", response_model=DogResponse)
async def upload_dog_image(
    dog_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(require_staff),
    service: PetService = Depends(get_pet_service),
):
    return DogResponse.from_dog(await service.upload_image(dog_id, file, current_user))


@router.delete("/dogs/{dog_id}")
async def delete_dog(
    dog_id: int,
    current_user: User = Depends(require_admin),
    service: PetService = Depends(get_pet_service),
):
    return service.delete_dog(dog_id, current_user)
