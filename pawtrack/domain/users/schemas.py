"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import USER_ROLES, User
from ...shared.validators import validate_choice, validate_email, validate_required_text


def _validate_password(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    return v


class UserCreate(BaseModel):
    """Schema for an admin creating a staff or client user"""

    email: str
    firstName: str
    lastName: str
    role: str = "client"
    password: Optional[str] = None
    clientId: Optional[int] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(validate_required_text(v, "Email"))

    @field_validator("firstName", "lastName")
    @classmethod
    def check_names(cls, v):
        return validate_required_text(v, "Name")

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return validate_choice(v, USER_ROLES, "Role")

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return _validate_password(v)


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return validate_choice(v, USER_ROLES, "Role")


class PasswordUpdate(BaseModel):
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return _validate_password(v)


class UserResponse(BaseModel):
    id: int
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    fullName: str
    role: str
    isActive: bool
    businessId: int
    businessName: Optional[str] = None
    businessSlug: Optional[str] = None
    clientId: Optional[int] = None
    profileImageUrl: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User, profile_image_url: Optional[str] = None) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name,
            fullName=user.full_name,
            role=user.role,
            isActive=user.is_active,
            businessId=user.business_id,
            businessName=user.business.name if user.business else None,
            businessSlug=user.business.slug if user.business else None,
            clientId=user.client.id if user.client else None,
            profileImageUrl=profile_image_url,
            createdAt=user.created_at,
        )


class TeacherSummary(BaseModel):
    id: int
    fullName: str
    email: str
    role: str
