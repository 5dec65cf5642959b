"""Record repository - dog history queries shared by every record type"""

from typing import Optional, TypeVar

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Dog, User
from ...models_records import (
    Assessment,
    Evidence,
    MedicalRecord,
    ProgressEntry,
    TrainingSession,
)

RecordT = TypeVar("RecordT", MedicalRecord, TrainingSession, Evidence, ProgressEntry, Assessment)

# Column each record type is listed by, newest first
ORDERING = {
    MedicalRecord: MedicalRecord.record_date,
    TrainingSession: TrainingSession.session_date,
    Evidence: Evidence.created_at,
    ProgressEntry: ProgressEntry.created_at,
    Assessment: Assessment.assessment_date,
}


class RecordRepository:
    @staticmethod
    def get_dog(db: Session, dog_id: int, business_id: int) -> Optional[Dog]:
        return db.query(Dog).filter(Dog.id == dog_id, Dog.business_id == business_id).first()

    @staticmethod
    def get_appointment(db: Session, appointment_id: int, business_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.business_id == business_id)
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
    def list_by_dog(db: Session, model: type[RecordT], dog_id: int, business_id: int) -> list[RecordT]:
        query = db.query(model).filter(model.dog_id == dog_id, model.business_id == business_id)
        if model is TrainingSession:
            query = query.options(joinedload(TrainingSession.teacher))
        return query.order_by(ORDERING[model].desc(), model.id.desc()).all()

    @staticmethod
    def get(db: Session, model: type[RecordT], record_id: int, business_id: int) -> Optional[RecordT]:
        return (
            db.query(model)
            .filter(model.id == record_id, model.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_session_evidence(db: Session, session_id: int, business_id: int) -> list[Evidence]:
        return (
            db.query(Evidence)
            .filter(Evidence.training_session_id == session_id, Evidence.business_id == business_id)
            .order_by(Evidence.created_at.desc(), Evidence.id.desc())
            .all()
        )

    @staticmethod
    def get_sessions_by_teacher(
        db: Session, teacher_id: int, business_id: int, limit: Optional[int] = None
    ) -> list[TrainingSession]:
        query = (
            db.query(TrainingSession)
            .options(joinedload(TrainingSession.dog), joinedload(TrainingSession.teacher))
            .filter(
                TrainingSession.teacher_id == teacher_id,
                TrainingSession.business_id == business_id,
            )
            .order_by(TrainingSession.session_date.desc(), TrainingSession.id.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def add(db: Session, record: RecordT) -> RecordT:
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update(db: Session, record: RecordT, **updates) -> RecordT:
        for key, value in updates.items():
            setattr(record, key, value)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete(db: Session, record) -> None:
        db.delete(record)
        db.commit()
