"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Client
from ...shared.validators import validate_email, validate_required_text


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("firstName", "lastName")
    @classmethod
    def check_names(cls, v):
        return validate_required_text(v, "Name")

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(validate_required_text(v, "Email"))


class ClientUpdate(BaseModel):
    """Schema for updating an existing client"""

    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("firstName", "lastName")
    @classmethod
    def check_names(cls, v):
        return None if v is None else validate_required_text(v, "Name")

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: int
    firstName: str
    lastName: str
    fullName: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    userId: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_client(cls, client: Client) -> "ClientResponse":
        return cls(
            id=client.id,
            firstName=client.first_name,
            lastName=client.last_name,
            fullName=client.full_name,
            email=client.email,
            phone=client.phone,
            address=client.address,
            userId=client.user_id,
            createdAt=client.created_at,
        )


class ClientDogSummary(BaseModel):
    id: int
    name: str
    breed: Optional[str] = None
    petTypeName: Optional[str] = None
    imageUrl: Optional[str] = None


class ClientWithDogsResponse(ClientResponse):
    dogs: list[ClientDogSummary] = []
