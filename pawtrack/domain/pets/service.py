"""Pet service - pet types, dogs and the complete dog record"""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from ...models import Dog, PetType, User
from ...models_records import (
    Assessment,
    Evidence,
    MedicalRecord,
    ProgressEntry,
    TrainingSession,
)
from ...utils.storage import get_storage, read_upload, validate_owned_key
from ..appointments.repository import AppointmentRepository
from ..appointments.schemas import AppointmentResponse
from ..clients.schemas import ClientResponse
from ..packages.repository import PackageRepository
from ..packages.schemas import PackageResponse
from ..records.repository import RecordRepository
from ..records.schemas import (
    AssessmentResponse,
    EvidenceResponse,
    MedicalRecordResponse,
    ProgressEntryResponse,
    TrainingSessionResponse,
)
from .repository import PetRepository
from .schemas import DogCreate, DogRecordResponse, DogResponse, DogUpdate, PetTypeCreate

logger = logging.getLogger(__name__)

# Fields a teacher may change on a dog
TEACHER_EDITABLE_FIELDS = {"notes", "imageKey"}

DOG_FIELD_MAP = {
    "clientId": "client_id",
    "name": "name",
    "petTypeId": "pet_type_id",
    "teacherId": "teacher_id",
    "breed": "breed",
    "age": "age",
    "weight": "weight",
    "notes": "notes",
    "imageKey": "image_key",
}


class PetService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PetRepository()

    # ========================================================================
    # PET TYPES
    # ========================================================================

    def get_pet_types(self, user: User) -> list[PetType]:
        return self.repo.get_pet_types(self.db, user.business_id)

    def create_pet_type(self, data: PetTypeCreate, user: User) -> PetType:
        if self.repo.get_pet_type_by_name(self.db, data.name, user.business_id):
            raise HTTPException(status_code=409, detail="Pet type already exists")
        pet_type = self.repo.create_pet_type(self.db, user.business_id, data.name)
        logger.info(f"🐾 Pet type '{pet_type.name}' created for business {user.business_id}")
        return pet_type

    # ========================================================================
    # DOGS
    # ========================================================================

    def get_dogs(self, user: User, client_id: Optional[int] = None) -> list[Dog]:
        return self.repo.get_dogs(self.db, user.business_id, client_id=client_id)

    def get_dogs_by_client(self, client_id: int, user: User) -> list[Dog]:
        if not self.repo.get_client(self.db, client_id, user.business_id):
            raise HTTPException(status_code=404, detail="Client not found")
        return self.repo.get_dogs(self.db, user.business_id, client_id=client_id)

    def get_dog(self, dog_id: int, user: User) -> Dog:
        dog = self.repo.get_dog(self.db, dog_id, user.business_id)
        if not dog:
            raise HTTPException(status_code=404, detail="Dog not found")
        return dog

    def _check_references(self, fields: dict, business_id: int):
        validate_owned_key(fields.get("imageKey"), business_id)
        if fields.get("clientId") is not None and not self.repo.get_client(
            self.db, fields["clientId"], business_id
        ):
            raise HTTPException(status_code=404, detail="Client not found")
        if fields.get("petTypeId") is not None and not self.repo.get_pet_type(
            self.db, fields["petTypeId"], business_id
        ):
            raise HTTPException(status_code=404, detail="Pet type not found")
        if fields.get("teacherId") is not None and not self.repo.get_staff_user(
            self.db, fields["teacherId"], business_id
        ):
            raise HTTPException(
                status_code=400, detail="Assigned teacher must be a teacher or admin of this business"
            )

    def create_dog(self, data: DogCreate, user: User) -> Dog:
        fields = data.model_dump()
        self._check_references(fields, user.business_id)
        dog = self.repo.create_dog(
            self.db,
            user.business_id,
            **{DOG_FIELD_MAP[k]: v for k, v in fields.items()},
        )
        logger.info(f"🐕 Dog {dog.id} '{dog.name}' registered for client {dog.client_id}")
        return self.get_dog(dog.id, user)

    def update_dog(self, dog_id: int, data: DogUpdate, user: User) -> Dog:
        dog = self.get_dog(dog_id, user)
        fields = data.model_dump(exclude_unset=True)

        if user.role == "teacher" and set(fields) - TEACHER_EDITABLE_FIELDS:
            raise HTTPException(
                status_code=403, detail="Teachers can only update a dog's notes and image"
            )

        new_client = fields.get("clientId")
        if (
            new_client is not None
            and new_client != dog.client_id
            and self.repo.has_client_bookings(self.db, dog.id, user.business_id)
        ):
            raise HTTPException(
                status_code=400,
                detail="Cannot move a dog with appointments or packages to another client",
            )

        self._check_references(fields, user.business_id)
        updates = {}
        for field, value in fields.items():
            if value is None and field in ("clientId", "name"):
                continue
            updates[DOG_FIELD_MAP[field]] = value

        self.repo.update_dog(self.db, dog, **updates)
        return self.get_dog(dog.id, user)

    def delete_dog(self, dog_id: int, user: User) -> dict:
        dog = self.get_dog(dog_id, user)
        image_key = dog.image_key
        self.repo.delete_dog(self.db, dog)
        get_storage().delete(image_key)
        logger.info(f"🗑️ Dog {dog_id} deleted with its records")
        return {"message": "Dog deleted"}

    async def upload_image(self, dog_id: int, file: UploadFile, user: User) -> Dog:
        dog = self.get_dog(dog_id, user)
        data = await read_upload(file)
        storage = get_storage()
        result = storage.upload(
            user.business_id, "dog-images", data, file.content_type, file.filename
        )
        previous = dog.image_key
        self.repo.update_dog(self.db, dog, image_key=result["key"])
        if previous and previous != result["key"]:
            storage.delete(previous)
        logger.info(f"📸 Image uploaded for dog {dog.id}: {result['key']}")
        return self.get_dog(dog.id, user)

    # ========================================================================
    # COMPLETE RECORD
    # ========================================================================

    def complete_record(self, dog_id: int, user: User) -> DogRecordResponse:
        """Dog, owner and the dog's whole history in one payload"""
        dog = self.get_dog(dog_id, user)
        business_id = user.business_id
        records = RecordRepository()

        appointments = AppointmentRepository.get_appointments(
            self.db, business_id, dog_id=dog.id
        )
        packages = [
            p
            for p in PackageRepository.get_packages(self.db, business_id, client_id=dog.client_id)
            if p.dog_id in (None, dog.id)
        ]

        return DogRecordResponse(
            dog=DogResponse.from_dog(dog),
            client=ClientResponse.from_client(dog.client),
            appointments=[AppointmentResponse.from_appointment(a) for a in appointments],
            medicalRecords=[
                MedicalRecordResponse.from_record(r)
                for r in records.list_by_dog(self.db, MedicalRecord, dog.id, business_id)
            ],
            trainingSessions=[
                TrainingSessionResponse.from_session(s)
                for s in records.list_by_dog(self.db, TrainingSession, dog.id, business_id)
            ],
            evidence=[
                EvidenceResponse.from_evidence(e)
                for e in records.list_by_dog(self.db, Evidence, dog.id, business_id)
            ],
            progressEntries=[
                ProgressEntryResponse.from_entry(p)
                for p in records.list_by_dog(self.db, ProgressEntry, dog.id, business_id)
            ],
            assessments=[
                AssessmentResponse.from_assessment(a)
                for a in records.list_by_dog(self.db, Assessment, dog.id, business_id)
            ],
            packages=[PackageResponse.from_package(p) for p in packages],
        )
