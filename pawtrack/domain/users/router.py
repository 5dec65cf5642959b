"""User router - admin user management"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from .schemas import PasswordUpdate, RoleUpdate, TeacherSummary, UserCreate, UserResponse
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=list[UserResponse])
async def get_users(
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return [UserResponse.from_user(u) for u in service.get_users(current_user)]


@router.get("/teachers", response_model=list[TeacherSummary])
async def get_teachers(
    current_user: User = Depends(require_staff),
    service: UserService = Depends(get_user_service),
):
    """Users that can be assigned to dogs, appointments and tasks"""
    return [
        TeacherSummary(id=u.id, fullName=u.full_name, email=u.email, role=u.role)
        for u in service.get_teachers(current_user)
    ]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.create_user(data, current_user))


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: int,
    data: RoleUpdate,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.update_role(user_id, data, current_user))


@router.patch("/{user_id}/password")
async def update_password(
    user_id: int,
    data: PasswordUpdate,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.update_password(user_id, data, current_user)


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Deactivate a user; records they authored are kept"""
    return service.deactivate_user(user_id, current_user)
