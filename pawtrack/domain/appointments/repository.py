"""Appointment repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Client, Dog, Service, User
from ...models_records import Task


class AppointmentRepository:
    @staticmethod
    def _query(db: Session, business_id: int):
        return (
            db.query(Appointment)
            .options(
                joinedload(Appointment.client),
                joinedload(Appointment.dog),
                joinedload(Appointment.service),
                joinedload(Appointment.teacher),
            )
            .filter(Appointment.business_id == business_id)
        )

    @staticmethod
    def get_appointments(
        db: Session,
        business_id: int,
        status: Optional[str] = None,
        client_id: Optional[int] = None,
        dog_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> list[Appointment]:
        query = AppointmentRepository._query(db, business_id)
        if status:
            query = query.filter(Appointment.status == status)
        if client_id is not None:
            query = query.filter(Appointment.client_id == client_id)
        if dog_id is not None:
            query = query.filter(Appointment.dog_id == dog_id)
        if teacher_id is not None:
            query = query.filter(Appointment.teacher_id == teacher_id)
        return query.order_by(Appointment.appointment_date.desc(), Appointment.id.desc()).all()

    @staticmethod
    def get_appointments_in_range(
        db: Session,
        business_id: int,
        start: datetime,
        end: datetime,
        teacher_id: Optional[int] = None,
        inclusive_end: bool = True,
    ) -> list[Appointment]:
        query = AppointmentRepository._query(db, business_id).filter(
            Appointment.appointment_date >= start,
            (Appointment.appointment_date <= end)
            if inclusive_end
            else (Appointment.appointment_date < end),
        )
        if teacher_id is not None:
            query = query.filter(Appointment.teacher_id == teacher_id)
        return query.order_by(Appointment.appointment_date.asc(), Appointment.id.asc()).all()

    @staticmethod
    def get_tasks_in_range(
        db: Session,
        business_id: int,
        start: datetime,
        end: datetime,
        assigned_to: Optional[int] = None,
    ) -> list[Task]:
        query = db.query(Task).filter(
            Task.business_id == business_id, Task.start_at >= start, Task.start_at < end
        )
        if assigned_to is not None:
            query = query.filter(Task.assigned_to == assigned_to)
        return query.order_by(Task.start_at.asc(), Task.id.asc()).all()

    @staticmethod
    def get_appointment(db: Session, appointment_id: int, business_id: int) -> Optional[Appointment]:
        return (
            AppointmentRepository._query(db, business_id)
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def get_client(db: Session, client_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_dog(db: Session, dog_id: int, business_id: int) -> Optional[Dog]:
        return db.query(Dog).filter(Dog.id == dog_id, Dog.business_id == business_id).first()

    @staticmethod
    def get_service(db: Session, service_id: int, business_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business_id)
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
    def create_appointment(db: Session, business_id: int, **data) -> Appointment:
        appointment = Appointment(business_id=business_id, **data)
        db.add(appointment)
        db.commit()
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            setattr(appointment, key, value)
        db.commit()
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
