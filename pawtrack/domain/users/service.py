"""User service - admin management of staff and client portal users"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import User
from ...security_utils import hash_password, mask_email
from .repository import UserRepository
from .schemas import PasswordUpdate, RoleUpdate, UserCreate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def get_users(self, current_user: User) -> list[User]:
        return self.repo.get_users(self.db, current_user.business_id)

    def get_teachers(self, current_user: User) -> list[User]:
        return self.repo.get_teachers(self.db, current_user.business_id)

    def get_user(self, user_id: int, current_user: User) -> User:
        user = self.repo.get_user(self.db, user_id, current_user.business_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def create_user(self, data: UserCreate, current_user: User) -> User:
        if self.repo.get_by_email(self.db, data.email):
            raise HTTPException(status_code=409, detail="Email already registered")

        client = None
        if data.clientId is not None:
            if data.role != "client":
                raise HTTPException(
                    status_code=400, detail="Only client users can be linked to a client record"
                )
            client = self.repo.get_client(self.db, data.clientId, current_user.business_id)
            if not client:
                raise HTTPException(status_code=404, detail="Client not found")
            if client.user_id is not None:
                raise HTTPException(status_code=400, detail="Client already has a portal user")

        try:
            user = self.repo.create_user(
                self.db,
                business_id=current_user.business_id,
                email=data.email,
                first_name=data.firstName,
                last_name=data.lastName,
                role=data.role,
                password_hash=hash_password(data.password) if data.password else None,
                is_active=True,
            )
            if client:
                client.user_id = user.id
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Email already registered") from e

        logger.info(
            f"✅ User {mask_email(user.email)} ({user.role}) created in business {user.business_id}"
        )
        return self.get_user(user.id, current_user)

    def update_role(self, user_id: int, data: RoleUpdate, current_user: User) -> User:
        user = self.get_user(user_id, current_user)
        if user.id == current_user.id and data.role != "admin":
            raise HTTPException(status_code=400, detail="You cannot remove your own admin role")

        old_role = user.role
        user.role = data.role
        self.db.commit()
        logger.info(f"🔄 User {user.id} role changed {old_role} -> {data.role}")
        return self.get_user(user.id, current_user)

    def update_password(self, user_id: int, data: PasswordUpdate, current_user: User) -> dict:
        user = self.get_user(user_id, current_user)
        user.password_hash = hash_password(data.password)
        self.db.commit()
        logger.info(f"🔑 Password reset for user {user.id} by admin {current_user.id}")
        return {"message": "Password updated"}

    def deactivate_user(self, user_id: int, current_user: User) -> dict:
        user = self.get_user(user_id, current_user)
        if user.id == current_user.id:
            raise HTTPException(status_code=400, detail="You cannot deactivate your own account")

        user.is_active = False
        self.db.commit()
        logger.info(f"🚫 User {user.id} deactivated by admin {current_user.id}")
        return {"message": "User deactivated"}
