"""Pet domain schemas - pet types and dogs"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Dog, PetType
from ...shared.validators import validate_non_negative, validate_required_text
from ...utils.storage import get_storage
from ..appointments.schemas import AppointmentResponse
from ..clients.schemas import ClientResponse
from ..packages.schemas import PackageResponse
from ..records.schemas import (
    AssessmentResponse,
    EvidenceResponse,
    MedicalRecordResponse,
    ProgressEntryResponse,
    TrainingSessionResponse,
)


class PetTypeCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_required_text(v, "Name")


class PetTypeResponse(BaseModel):
    id: int
    name: str

    @classmethod
    def from_pet_type(cls, pet_type: PetType) -> "PetTypeResponse":
        return cls(id=pet_type.id, name=pet_type.name)


class DogCreate(BaseModel):
    clientId: int
    name: str
    petTypeId: Optional[int] = None
    teacherId: Optional[int] = None
    breed: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[Decimal] = None
    notes: Optional[str] = None
    imageKey: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_required_text(v, "Name")

    @field_validator("age")
    @classmethod
    def check_age(cls, v):
        return validate_non_negative(v, "Age")

    @field_validator("weight")
    @classmethod
    def check_weight(cls, v):
        return validate_non_negative(v, "Weight")


class DogUpdate(BaseModel):
    clientId: Optional[int] = None
    name: Optional[str] = None
    petTypeId: Optional[int] = None
    teacherId: Optional[int] = None
    breed: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[Decimal] = None
    notes: Optional[str] = None
    imageKey: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return None if v is None else validate_required_text(v, "Name")

    @field_validator("age")
    @classmethod
    def check_age(cls, v):
        return validate_non_negative(v, "Age")

    @field_validator("weight")
    @classmethod
    def check_weight(cls, v):
        return validate_non_negative(v, "Weight")


class DogResponse(BaseModel):
    id: int
    clientId: int
    clientName: Optional[str] = None
    name: str
    petTypeId: Optional[int] = None
    petTypeName: Optional[str] = None
    teacherId: Optional[int] = None
    teacherName: Optional[str] = None
    breed: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[str] = None
    notes: Optional[str] = None
    imageKey: Optional[str] = None
    imageUrl: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_dog(cls, dog: Dog) -> "DogResponse":
        return cls(
            id=dog.id,
            clientId=dog.client_id,
            clientName=dog.client.full_name if dog.client else None,
            name=dog.name,
            petTypeId=dog.pet_type_id,
            petTypeName=dog.pet_type_name,
            teacherId=dog.teacher_id,
            teacherName=dog.teacher.full_name if dog.teacher else None,
            breed=dog.breed,
            age=dog.age,
            weight=f"{dog.weight:.2f}" if dog.weight is not None else None,
            notes=dog.notes,
            imageKey=dog.image_key,
            imageUrl=get_storage().url(dog.image_key),
            createdAt=dog.created_at,
        )


class DogRecordResponse(BaseModel):
    """Everything known about one dog, as shown on its record page"""

    dog: DogResponse
    client: ClientResponse
    appointments: list[AppointmentResponse]
    medicalRecords: list[MedicalRecordResponse]
    trainingSessions: list[TrainingSessionResponse]
    evidence: list[EvidenceResponse]
    progressEntries: list[ProgressEntryResponse]
    assessments: list[AssessmentResponse]
    packages: list[PackageResponse]
