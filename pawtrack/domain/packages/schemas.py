"""Prepaid package schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models_billing import PACKAGE_STATUSES, Package, PackageSession
from ...shared.validators import (
    UTCDateTime,
    format_money,
    validate_choice,
    validate_non_negative,
    validate_required_text,
)


def _check_total(v: Optional[int]) -> Optional[int]:
    if v is not None and v < 1:
        raise ValueError("A package needs at least one session")
    return v


class PackageCreate(BaseModel):
    clientId: int
    packageName: str
    totalSessions: int
    dogId: Optional[int] = None
    serviceId: Optional[int] = None
    price: Optional[Decimal] = None
    purchaseDate: Optional[UTCDateTime] = None
    expiryDate: Optional[UTCDateTime] = None
    notes: Optional[str] = None

    @field_validator("packageName")
    @classmethod
    def check_name(cls, v):
        return validate_required_text(v, "Package name")

    @field_validator("totalSessions")
    @classmethod
    def check_total(cls, v):
        return _check_total(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return validate_non_negative(v, "Price")


class PackageUpdate(BaseModel):
    packageName: Optional[str] = None
    totalSessions: Optional[int] = None
    price: Optional[Decimal] = None
    expiryDate: Optional[UTCDateTime] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("packageName")
    @classmethod
    def check_name(cls, v):
        return None if v is None else validate_required_text(v, "Package name")

    @field_validator("totalSessions")
    @classmethod
    def check_total(cls, v):
        return _check_total(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return validate_non_negative(v, "Price")

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, PACKAGE_STATUSES, "Status")


class ConsumeSessionRequest(BaseModel):
    """One attended session taken from a package"""

    sessionDate: Optional[UTCDateTime] = None
    sessionType: Optional[str] = None
    dogId: Optional[int] = None
    notes: Optional[str] = None


class PackageSessionResponse(BaseModel):
    id: int
    packageId: int
    clientId: int
    dogId: Optional[int] = None
    sessionDate: datetime
    sessionType: Optional[str] = None
    status: str
    notes: Optional[str] = None

    @classmethod
    def from_session(cls, session: PackageSession) -> "PackageSessionResponse":
        return cls(
            id=session.id,
            packageId=session.package_id,
            clientId=session.client_id,
            dogId=session.dog_id,
            sessionDate=session.session_date,
            sessionType=session.session_type,
            status=session.status,
            notes=session.notes,
        )


class PackageResponse(BaseModel):
    id: int
    clientId: int
    clientName: Optional[str] = None
    dogId: Optional[int] = None
    dogName: Optional[str] = None
    serviceId: Optional[int] = None
    serviceName: Optional[str] = None
    packageName: str
    totalSessions: int
    usedSessions: int
    remainingSessions: int
    price: Optional[str] = None
    purchaseDate: Optional[datetime] = None
    expiryDate: Optional[datetime] = None
    status: str
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_package(cls, package: Package) -> "PackageResponse":
        return cls(
            id=package.id,
            clientId=package.client_id,
            clientName=package.client.full_name if package.client else None,
            dogId=package.dog_id,
            dogName=package.dog.name if package.dog else None,
            serviceId=package.service_id,
            serviceName=package.service.name if package.service else None,
            packageName=package.package_name,
            totalSessions=package.total_sessions,
            usedSessions=package.used_sessions,
            remainingSessions=package.remaining_sessions,
            price=format_money(package.price) if package.price is not None else None,
            purchaseDate=package.purchase_date,
            expiryDate=package.expiry_date,
            status=package.status,
            notes=package.notes,
            createdAt=package.created_at,
        )


class ConsumeSessionResponse(BaseModel):
    package: PackageResponse
    session: PackageSessionResponse
