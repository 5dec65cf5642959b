"""Pet repository - pet types and dogs"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Client, Dog, PetType, User
from ...models_billing import Package


class PetRepository:
    @staticmethod
    def get_pet_types(db: Session, business_id: int) -> list[PetType]:
        return (
            db.query(PetType)
            .filter(PetType.business_id == business_id)
            .order_by(PetType.name)
            .all()
        )

    @staticmethod
    def get_pet_type(db: Session, pet_type_id: int, business_id: int) -> Optional[PetType]:
        return (
            db.query(PetType)
            .filter(PetType.id == pet_type_id, PetType.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_pet_type_by_name(db: Session, name: str, business_id: int) -> Optional[PetType]:
        return (
            db.query(PetType)
            .filter(PetType.business_id == business_id, PetType.name.ilike(name))
            .first()
        )

    @staticmethod
    def create_pet_type(db: Session, business_id: int, name: str) -> PetType:
        pet_type = PetType(business_id=business_id, name=name)
        db.add(pet_type)
        db.commit()
        db.refresh(pet_type)
        return pet_type

    @staticmethod
    def _dog_query(db: Session, business_id: int):
        return (
            db.query(Dog)
            .options(joinedload(Dog.client), joinedload(Dog.pet_type), joinedload(Dog.teacher))
            .filter(Dog.business_id == business_id)
        )

    @staticmethod
    def get_dogs(
        db: Session,
        business_id: int,
        client_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> list[Dog]:
        query = PetRepository._dog_query(db, business_id)
        if client_id is not None:
            query = query.filter(Dog.client_id == client_id)
        if teacher_id is not None:
            query = query.filter(Dog.teacher_id == teacher_id)
        return query.order_by(Dog.name, Dog.id).all()

    @staticmethod
    def get_dog(db: Session, dog_id: int, business_id: int) -> Optional[Dog]:
        return PetRepository._dog_query(db, business_id).filter(Dog.id == dog_id).first()

    @staticmethod
    def get_client(db: Session, client_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_staff_user(db: Session, user_id: int, business_id: int) -> Optional[User]:
        return (
            db.query(User)
            .filter(
                User.id == user_id,
                User.business_id == business_id,
                User.role.in_(("teacher", "admin")),
            )
            .first()
        )

    @staticmethod
    def create_dog(db: Session, business_id: int, **dog_data) -> Dog:
        dog = Dog(business_id=business_id, **dog_data)
        db.add(dog)
        db.commit()
        return dog

    @staticmethod
    def has_client_bookings(db: Session, dog_id: int, business_id: int) -> bool:
        """Appointments or packages tie a dog to its current client"""
        appointment = (
            db.query(Appointment.id)
            .filter(Appointment.dog_id == dog_id, Appointment.business_id == business_id)
            .first()
        )
        if appointment:
            return True
        package = (
            db.query(Package.id)
            .filter(Package.dog_id == dog_id, Package.business_id == business_id)
            .first()
        )
        return package is not None

    @staticmethod
    def update_dog(db: Session, dog: Dog, **updates) -> Dog:
        for key, value in updates.items():
            setattr(dog, key, value)
        db.commit()
        return dog

    @staticmethod
    def delete_dog(db: Session, dog: Dog) -> None:
        db.delete(dog)
        db.commit()
