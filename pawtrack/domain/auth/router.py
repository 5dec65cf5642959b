from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import rate_limit_login, rate_limit_register
from ...utils.storage import get_storage
from ..users.schemas import UserResponse
from .schemas import LoginRequest, RegisterRequest, TokenResponse
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    data: RegisterRequest,
    _: None = Depends(rate_limit_register),
    service: AuthService = Depends(get_auth_service),
):
    """Create a new business together with its first admin user"""
    return service.register(data)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(rate_limit_login),
    service: AuthService = Depends(get_auth_service),
):
    return service.login(data)


@router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy"""
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.from_user(
        current_user, profile_image_url=get_storage().url(current_user.profile_image_key)
    )
