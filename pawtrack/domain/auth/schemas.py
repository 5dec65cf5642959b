"""Auth domain schemas"""

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_email, validate_required_text
from ..users.schemas import UserResponse


class RegisterRequest(BaseModel):
    """Sign-up of a new business and its first admin"""

    email: str
    password: str
    confirmPassword: str
    firstName: str
    lastName: str
    businessName: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(validate_required_text(v, "Email"))

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("firstName", "lastName", "businessName")
    @classmethod
    def check_required(cls, v):
        return validate_required_text(v)

    @model_validator(mode="after")
    def check_passwords_match(self):
        if self.password != self.confirmPassword:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class TokenResponse(BaseModel):
    accessToken: str
    tokenType: str = "bearer"
    user: UserResponse
