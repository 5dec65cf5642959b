from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models_records import PROTOCOL_CATEGORIES, Protocol
from ...shared.validators import validate_choice, validate_required_text


class ProtocolStep(BaseModel):
    title: str
    description: Optional[str] = None
    duration: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required_text(v, "Step title")


class ProtocolCreate(BaseModel):
    name: str
    category: str
    objectives: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    steps: list[ProtocolStep] = []
    isActive: bool = True

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_required_text(v, "Name")

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return validate_choice(v, PROTOCOL_CATEGORIES, "Category")


class ProtocolUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    objectives: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    steps: Optional[list[ProtocolStep]] = None
    isActive: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return None if v is None else validate_required_text(v, "Name")

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return validate_choice(v, PROTOCOL_CATEGORIES, "Category")


class ProtocolResponse(BaseModel):
    id: int
    name: str
    category: str
    objectives: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    steps: list[ProtocolStep] = []
    isActive: bool
    createdBy: Optional[int] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_protocol(cls, protocol: Protocol) -> "ProtocolResponse":
        return cls(
            id=protocol.id,
            name=protocol.name,
            category=protocol.category,
            objectives=protocol.objectives,
            description=protocol.description,
            duration=protocol.duration,
            steps=[ProtocolStep(**step) for step in (protocol.steps or [])],
            isActive=protocol.is_active,
            createdBy=protocol.created_by,
            createdAt=protocol.created_at,
            updatedAt=protocol.updated_at,
        )
