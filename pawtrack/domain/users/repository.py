"""User repository - Database operations for users"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Business, Client, User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def business_slug_exists(db: Session, slug: str) -> bool:
        return db.query(Business.id).filter(Business.slug == slug).first() is not None

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_user(db: Session, user_id: int, business_id: int) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.business), joinedload(User.client))
            .filter(User.id == user_id, User.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_users(db: Session, business_id: int) -> list[User]:
        return (
            db.query(User)
            .options(joinedload(User.business), joinedload(User.client))
            .filter(User.business_id == business_id)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    @staticmethod
    def get_teachers(db: Session, business_id: int) -> list[User]:
        """Active users who can be assigned dogs, appointments and tasks"""
        return (
            db.query(User)
            .filter(
                User.business_id == business_id,
                User.role.in_(("teacher", "admin")),
                User.is_active.is_(True),
            )
            .order_by(User.first_name, User.last_name)
            .all()
        )

    @staticmethod
    def get_client(db: Session, client_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.flush()
        return user
