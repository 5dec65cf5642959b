"""Service catalog schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import SERVICE_TYPES, Service
from ...shared.validators import (
    format_money,
    validate_choice,
    validate_non_negative,
    validate_positive,
    validate_required_text,
)


class ServiceCreate(BaseModel):
    name: str
    type: str
    price: Decimal
    description: Optional[str] = None
    duration: Optional[int] = None
    isActive: bool = True

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_required_text(v, "Name")

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, SERVICE_TYPES, "Service type")

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return validate_non_negative(v, "Price")

    @field_validator("duration")
    @classmethod
    def check_duration(cls, v):
        return validate_positive(v, "Duration")


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    isActive: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return None if v is None else validate_required_text(v, "Name")

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, SERVICE_TYPES, "Service type")

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return validate_non_negative(v, "Price")

    @field_validator("duration")
    @classmethod
    def check_duration(cls, v):
        return validate_positive(v, "Duration")


class ServiceResponse(BaseModel):
    id: int
    name: str
    type: str
    price: str
    description: Optional[str] = None
    duration: Optional[int] = None
    isActive: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_service(cls, service: Service) -> "ServiceResponse":
        return cls(
            id=service.id,
            name=service.name,
            type=service.type,
            price=format_money(service.price),
            description=service.description,
            duration=service.duration,
            isActive=service.is_active,
            createdAt=service.created_at,
        )
