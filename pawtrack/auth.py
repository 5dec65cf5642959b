import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .database import get_db
from .models import User
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

ROLE_LABELS = {"admin": "Admin", "teacher": "Teacher", "client": "Client"}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received: length {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.error("❌ Token missing user ID claim")
        raise HTTPException(status_code=401, detail="Invalid token claims") from None

    user = (
        db.query(User)
        .options(joinedload(User.business))
        .filter(User.id == user_id)
        .first()
    )
    if not user or not user.is_active:
        logger.warning(f"⚠️ Token for missing or inactive user {user_id}")
        raise HTTPException(status_code=401, detail="User not found or inactive")

    return user


def require_roles(*roles: str):
    """
    Create a dependency that only lets the given roles through.

    Example usage:
        @router.post("")
        async def create_service(current_user: User = Depends(require_roles("admin"))):
            ...
    """

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            label = " or ".join(ROLE_LABELS.get(role, role) for role in roles)
            logger.warning(
                f"🚫 User {current_user.id} ({current_user.role}) denied, requires {roles}"
            )
            raise HTTPException(status_code=403, detail=f"Access denied. {label} role required.")
        return current_user

    return role_checker


require_admin = require_roles("admin")
require_staff = require_roles("admin", "teacher")
require_client = require_roles("client")
