"""Auth service - registration and password login"""

import logging
import secrets

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import config
from ...models import Business, User
from ...security_utils import create_access_token, hash_password, mask_email, verify_password
from ...shared.validators import slugify
from ..services.service import seed_default_services
from ..users.repository import UserRepository
from ..users.schemas import UserResponse
from .schemas import LoginRequest, RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def issue_token(user: User) -> TokenResponse:
    token = create_access_token({"sub": str(user.id), "role": user.role, "bid": user.business_id})
    return TokenResponse(accessToken=token, user=UserResponse.from_user(user))


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def _business_slug(self, name: str) -> str:
        base = slugify(name, "business")
        slug = base
        while self.repo.business_slug_exists(self.db, slug):
            slug = f"{base}-{secrets.token_hex(2)}"
        return slug

    def register(self, data: RegisterRequest) -> TokenResponse:
        if self.repo.get_by_email(self.db, data.email):
            logger.warning(f"⚠️ Registration with existing email {mask_email(data.email)}")
            raise HTTPException(status_code=409, detail="Email already registered")

        try:
            business = Business(
                name=data.businessName, slug=self._business_slug(data.businessName)
            )
            self.db.add(business)
            self.db.flush()

            user = self.repo.create_user(
                self.db,
                business_id=business.id,
                email=data.email,
                first_name=data.firstName,
                last_name=data.lastName,
                password_hash=hash_password(data.password),
                role="admin",
                is_active=True,
            )
            if config.SEED_DEFAULT_SERVICES:
                seed_default_services(self.db, business.id)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Email already registered") from e

        self.db.refresh(user)
        logger.info(f"🆕 Business {business.id} registered by {mask_email(user.email)}")
        return issue_token(user)

    def login(self, data: LoginRequest) -> TokenResponse:
        user = self.repo.get_by_email(self.db, data.email)
        if not user or not user.is_active or not verify_password(data.password, user.password_hash):
            logger.warning(f"🔒 Failed login for {mask_email(data.email)}")
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

        logger.info(f"✅ User {user.id} logged in")
        return issue_token(user)
