from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Client, Dog
from ...models_records import TrainingSession


class PortalRepository:
    @staticmethod
    def get_client_for_user(db: Session, user_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.user_id == user_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_teacher_appointments(
        db: Session,
        teacher_id: int,
        business_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Appointment]:
        query = (
            db.query(Appointment)
            .options(
                joinedload(Appointment.client),
                joinedload(Appointment.dog),
                joinedload(Appointment.service),
                joinedload(Appointment.teacher),
            )
            .filter(Appointment.business_id == business_id, Appointment.teacher_id == teacher_id)
        )
        if start is not None:
            query = query.filter(Appointment.appointment_date >= start)
        if end is not None:
            query = query.filter(Appointment.appointment_date < end)
        if start is not None:
            return query.order_by(Appointment.appointment_date.asc()).all()
        return query.order_by(Appointment.appointment_date.desc()).all()

    @staticmethod
    def count_sessions(
        db: Session, teacher_id: int, business_id: int, start: datetime, end: datetime
    ) -> int:
        return (
            db.query(func.count(TrainingSession.id))
            .filter(
                TrainingSession.business_id == business_id,
                TrainingSession.teacher_id == teacher_id,
                TrainingSession.session_date >= start,
                TrainingSession.session_date < end,
            )
            .scalar()
        )

    @staticmethod
    def count_assigned_dogs(db: Session, teacher_id: int, business_id: int) -> int:
        return (
            db.query(func.count(Dog.id))
            .filter(Dog.business_id == business_id, Dog.teacher_id == teacher_id)
            .scalar()
        )
