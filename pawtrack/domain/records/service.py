"""Record service - business rules for dog history"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Dog, User
from ...models_records import (
    Assessment,
    Evidence,
    MedicalRecord,
    ProgressEntry,
    TrainingSession,
)
from ...security_utils import sanitize_text
from ...utils.storage import get_storage, validate_owned_key
from .repository import RecordRepository
from .schemas import (
    AssessmentCreate,
    AssessmentSummary,
    AssessmentUpdate,
    EvidenceCreate,
    MedicalRecordCreate,
    MedicalRecordUpdate,
    ProgressEntryCreate,
    ProgressEntryUpdate,
    TrainingSessionCreate,
    TrainingSessionUpdate,
    section_averages,
)

logger = logging.getLogger(__name__)

MEDICAL_FIELDS = {
    "recordDate": "record_date",
    "recordType": "record_type",
    "title": "title",
    "veterinarian": "veterinarian",
    "description": "description",
    "medications": "medications",
    "notes": "notes",
}
SESSION_FIELDS = {
    "sessionDate": "session_date",
    "appointmentId": "appointment_id",
    "duration": "duration",
    "objective": "objective",
    "activities": "activities",
    "progress": "progress",
    "behaviorNotes": "behavior_notes",
    "nextSteps": "next_steps",
    "rating": "rating",
}
PROGRESS_FIELDS = {
    "title": "title",
    "description": "description",
    "photos": "photos",
    "videos": "videos",
}
ASSESSMENT_FIELDS = {
    "assessmentDate": "assessment_date",
    "scores": "scores",
    "comments": "comments",
}


def _mapped_updates(data, field_map: dict) -> dict:
    """Translate explicitly sent request fields to column names"""
    return {field_map[k]: v for k, v in data.model_dump(exclude_unset=True).items() if k in field_map}


class RecordService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = RecordRepository()

    def get_dog(self, dog_id: int, user: User) -> Dog:
        dog = self.repo.get_dog(self.db, dog_id, user.business_id)
        if not dog:
            raise HTTPException(status_code=404, detail="Dog not found")
        return dog

    def _get(self, model, record_id: int, user: User, label: str):
        record = self.repo.get(self.db, model, record_id, user.business_id)
        if not record:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return record

    def _check_appointment(self, appointment_id: Optional[int], dog_id: int, user: User):
        if appointment_id is None:
            return
        appointment = self.repo.get_appointment(self.db, appointment_id, user.business_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        if appointment.dog_id != dog_id:
            raise HTTPException(status_code=400, detail="Appointment is for a different dog")

    # ------------------------------------------------------------------
    # Medical records
    # ------------------------------------------------------------------

    def get_medical_records(self, dog_id: int, user: User) -> list[MedicalRecord]:
        self.get_dog(dog_id, user)
        return self.repo.list_by_dog(self.db, MedicalRecord, dog_id, user.business_id)

    def get_medical_record(self, record_id: int, user: User) -> MedicalRecord:
        return self._get(MedicalRecord, record_id, user, "Medical record")

    def create_medical_record(self, data: MedicalRecordCreate, user: User) -> MedicalRecord:
        self.get_dog(data.dogId, user)
        record = MedicalRecord(
            business_id=user.business_id,
            dog_id=data.dogId,
            record_date=data.recordDate,
            record_type=data.recordType,
            title=data.title,
            veterinarian=data.veterinarian,
            description=data.description,
            medications=data.medications,
            notes=data.notes,
        )
        record = self.repo.add(self.db, record)
        logger.info(f"🩺 Medical record {record.id} ({record.record_type}) added for dog {record.dog_id}")
        return record

    def update_medical_record(
        self, record_id: int, data: MedicalRecordUpdate, user: User
    ) -> MedicalRecord:
        record = self.get_medical_record(record_id, user)
        updates = _mapped_updates(data, MEDICAL_FIELDS)
        for required in ("record_date", "record_type", "title"):
            if updates.get(required, "") is None:
                del updates[required]
        return self.repo.update(self.db, record, **updates)

    def delete_medical_record(self, record_id: int, user: User) -> dict:
        self.repo.delete(self.db, self.get_medical_record(record_id, user))
        return {"message": "Medical record deleted"}

    # ------------------------------------------------------------------
    # Training sessions
    # ------------------------------------------------------------------

    def get_training_sessions(self, dog_id: int, user: User) -> list[TrainingSession]:
        self.get_dog(dog_id, user)
        return self.repo.list_by_dog(self.db, TrainingSession, dog_id, user.business_id)

    def get_training_session(self, session_id: int, user: User) -> TrainingSession:
        return self._get(TrainingSession, session_id, user, "Training session")

    def create_training_session(self, data: TrainingSessionCreate, user: User) -> TrainingSession:
        self.get_dog(data.dogId, user)
        self._check_appointment(data.appointmentId, data.dogId, user)

        teacher_id = data.teacherId if data.teacherId is not None else user.id
        if not self.repo.get_staff_user(self.db, teacher_id, user.business_id):
            raise HTTPException(
                status_code=400, detail="Assigned teacher must be a teacher of this business"
            )

        session = TrainingSession(
            business_id=user.business_id,
            dog_id=data.dogId,
            teacher_id=teacher_id,
            appointment_id=data.appointmentId,
            session_date=data.sessionDate,
            duration=data.duration,
            objective=data.objective,
            activities=data.activities,
            progress=data.progress,
            behavior_notes=data.behaviorNotes,
            next_steps=data.nextSteps,
            rating=data.rating,
        )
        session = self.repo.add(self.db, session)
        logger.info(f"🎓 Training session {session.id} recorded for dog {session.dog_id}")
        return session

    def update_training_session(
        self, session_id: int, data: TrainingSessionUpdate, user: User
    ) -> TrainingSession:
        session = self.get_training_session(session_id, user)
        updates = _mapped_updates(data, SESSION_FIELDS)
        if updates.get("appointment_id") is not None:
            self._check_appointment(updates["appointment_id"], session.dog_id, user)
        if "session_date" in updates and updates["session_date"] is None:
            del updates["session_date"]
        return self.repo.update(self.db, session, **updates)

    def delete_training_session(self, session_id: int, user: User) -> dict:
        """Evidence attached to the session stays on the dog, detached from the session"""
        session = self.get_training_session(session_id, user)
        for evidence in session.evidence:
            evidence.training_session_id = None
        self.repo.delete(self.db, session)
        return {"message": "Training session deleted"}

    # ------------------------------------------------------------------
    # Evidence
    # ------------------------------------------------------------------

    def get_evidence_for_dog(self, dog_id: int, user: User) -> list[Evidence]:
        self.get_dog(dog_id, user)
        return self.repo.list_by_dog(self.db, Evidence, dog_id, user.business_id)

    def get_evidence_for_session(self, session_id: int, user: User) -> list[Evidence]:
        self.get_training_session(session_id, user)
        return self.repo.get_session_evidence(self.db, session_id, user.business_id)

    def get_evidence(self, evidence_id: int, user: User) -> Evidence:
        return self._get(Evidence, evidence_id, user, "Evidence")

    def create_evidence(self, data: EvidenceCreate, user: User) -> Evidence:
        self.get_dog(data.dogId, user)
        if data.trainingSessionId is not None:
            session = self.get_training_session(data.trainingSessionId, user)
            if session.dog_id != data.dogId:
                raise HTTPException(
                    status_code=400, detail="Training session belongs to a different dog"
                )

        evidence = Evidence(
            business_id=user.business_id,
            dog_id=data.dogId,
            training_session_id=data.trainingSessionId,
            type=data.type,
            title=data.title,
            description=data.description,
            file_key=validate_owned_key(data.fileKey, user.business_id),
            created_by=user.id,
        )
        evidence = self.repo.add(self.db, evidence)
        logger.info(f"📎 Evidence {evidence.id} ({evidence.type}) added for dog {evidence.dog_id}")
        return evidence

    def delete_evidence(self, evidence_id: int, user: User) -> dict:
        evidence = self.get_evidence(evidence_id, user)
        file_key = evidence.file_key
        self.repo.delete(self.db, evidence)
        get_storage().delete(file_key)
        return {"message": "Evidence deleted"}

    # ------------------------------------------------------------------
    # Progress entries
    # ------------------------------------------------------------------

    def get_progress_entries(self, dog_id: int, user: User) -> list[ProgressEntry]:
        self.get_dog(dog_id, user)
        return self.repo.list_by_dog(self.db, ProgressEntry, dog_id, user.business_id)

    def get_progress_entry(self, entry_id: int, user: User) -> ProgressEntry:
        return self._get(ProgressEntry, entry_id, user, "Progress entry")

    def create_progress_entry(self, data: ProgressEntryCreate, user: User) -> ProgressEntry:
        self.get_dog(data.dogId, user)
        for key in [*data.photos, *data.videos]:
            validate_owned_key(key, user.business_id)
        self._check_appointment(data.appointmentId, data.dogId, user)
        entry = ProgressEntry(
            business_id=user.business_id,
            dog_id=data.dogId,
            appointment_id=data.appointmentId,
            title=data.title,
            description=sanitize_text(data.description),
            photos=data.photos,
            videos=data.videos,
            created_by=user.id,
        )
        return self.repo.add(self.db, entry)

    def update_progress_entry(
        self, entry_id: int, data: ProgressEntryUpdate, user: User
    ) -> ProgressEntry:
        entry = self.get_progress_entry(entry_id, user)
        updates = {k: v for k, v in _mapped_updates(data, PROGRESS_FIELDS).items() if v is not None}
        for key in [*updates.get("photos", []), *updates.get("videos", [])]:
            validate_owned_key(key, user.business_id)
        if "description" in updates:
            updates["description"] = sanitize_text(updates["description"])
        return self.repo.update(self.db, entry, **updates)

    def delete_progress_entry(self, entry_id: int, user: User) -> dict:
        self.repo.delete(self.db, self.get_progress_entry(entry_id, user))
        return {"message": "Progress entry deleted"}

    # ------------------------------------------------------------------
    # Assessments
    # ------------------------------------------------------------------

    def get_assessments(self, dog_id: int, user: User) -> list[Assessment]:
        self.get_dog(dog_id, user)
        return self.repo.list_by_dog(self.db, Assessment, dog_id, user.business_id)

    def get_assessment(self, assessment_id: int, user: User) -> Assessment:
        return self._get(Assessment, assessment_id, user, "Assessment")

    def create_assessment(self, data: AssessmentCreate, user: User) -> Assessment:
        self.get_dog(data.dogId, user)
        assessment = Assessment(
            business_id=user.business_id,
            dog_id=data.dogId,
            assessment_date=data.assessmentDate,
            scores=data.scores,
            comments=data.comments,
            created_by=user.id,
        )
        assessment = self.repo.add(self.db, assessment)
        logger.info(
            f"📝 Assessment {assessment.id} for dog {assessment.dog_id} "
            f"({len(data.scores)} indicators scored)"
        )
        return assessment

    def update_assessment(self, assessment_id: int, data: AssessmentUpdate, user: User) -> Assessment:
        assessment = self.get_assessment(assessment_id, user)
        updates = {k: v for k, v in _mapped_updates(data, ASSESSMENT_FIELDS).items() if v is not None}
        return self.repo.update(self.db, assessment, **updates)

    def delete_assessment(self, assessment_id: int, user: User) -> dict:
        self.repo.delete(self.db, self.get_assessment(assessment_id, user))
        return {"message": "Assessment deleted"}

    def get_assessment_summary(self, assessment_id: int, user: User) -> AssessmentSummary:
        assessment = self.get_assessment(assessment_id, user)
        scores = assessment.scores or {}
        values = list(scores.values())
        return AssessmentSummary(
            assessmentId=assessment.id,
            assessmentDate=assessment.assessment_date,
            sections=section_averages(scores),
            overall=round(sum(values) / len(values), 2) if values else None,
        )
