"""Dog history schemas - medical records, training sessions, evidence, progress, assessments"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...models_records import (
    EVIDENCE_TYPES,
    MEDICAL_RECORD_TYPES,
    Assessment,
    Evidence,
    MedicalRecord,
    ProgressEntry,
    TrainingSession,
)
from ...shared.validators import UTCDateTime, validate_choice, validate_positive, validate_required_text
from ...utils.storage import get_storage

# Behaviour indicators scored 1-5, grouped by assessment section
ASSESSMENT_SECTIONS: dict[str, tuple[str, ...]] = {
    "reaction": (
        "reactionArrivalHidesBehind",
        "reactionArrivalRigid",
        "reactionArrivalSits",
        "reactionArrivalImmobile",
        "reactionAnamnesisHidesBehind",
        "reactionAnamnesisRigid",
        "reactionAnamnesisSits",
        "reactionAnamnesisImmobile",
        "reactionEvalHidesBehind",
        "reactionEvalRigid",
        "reactionEvalSits",
        "reactionEvalImmobile",
    ),
    "physical": (
        "physCoat",
        "physTemperature",
        "physEyes",
        "physTeeth",
        "physWeight",
        "physSmell",
        "physMuscleTension",
        "physTouchReactive",
        "physSalivating",
        "physSweatingPaws",
        "physShedding",
    ),
    "movement": ("movBalance", "movGait", "movSpeed", "movCoordination"),
    "leash": (
        "leashOwnerSecure",
        "leashOwnerPulls",
        "leashOwnerReactive",
        "leashOwnerAggressive",
        "leashOtherSecure",
        "leashOtherPulls",
        "leashOtherReactive",
        "leashOtherAggressive",
    ),
    "calming": (
        "calmYawning",
        "calmLicking",
        "calmStretching",
        "calmTurnHead",
        "calmBlinking",
        "calmSniffing",
    ),
    "interaction": ("interactionStrangers", "interactionOtherDogs"),
    "posture": (
        "postureTail",
        "postureHead",
        "postureEars",
        "postureEyes",
        "postureBalance",
        "postureSymmetry",
        "postureBreathing",
        "postureRolling",
        "postureCrouching",
    ),
}
SCORE_KEYS = frozenset(key for keys in ASSESSMENT_SECTIONS.values() for key in keys)
COMMENT_KEYS = frozenset(
    ("reaction", "physical", "movement", "leash", "interaction", "posture", "general")
)


def _check_rating(v: Optional[int]) -> Optional[int]:
    if v is not None and not 1 <= v <= 5:
        raise ValueError("Rating must be between 1 and 5")
    return v


# ============================================================================
# MEDICAL RECORDS
# ============================================================================


class MedicalRecordCreate(BaseModel):
    dogId: int
    recordDate: UTCDateTime
    recordType: str
    title: str
    veterinarian: Optional[str] = None
    description: Optional[str] = None
    medications: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("recordType")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, MEDICAL_RECORD_TYPES, "Record type")

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required_text(v, "Title")


class MedicalRecordUpdate(BaseModel):
    recordDate: Optional[UTCDateTime] = None
    recordType: Optional[str] = None
    title: Optional[str] = None
    veterinarian: Optional[str] = None
    description: Optional[str] = None
    medications: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("recordType")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, MEDICAL_RECORD_TYPES, "Record type")

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return None if v is None else validate_required_text(v, "Title")


class MedicalRecordResponse(BaseModel):
    id: int
    dogId: int
    recordDate: datetime
    recordType: str
    title: str
    veterinarian: Optional[str] = None
    description: Optional[str] = None
    medications: Optional[str] = None
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: MedicalRecord) -> "MedicalRecordResponse":
        return cls(
            id=record.id,
            dogId=record.dog_id,
            recordDate=record.record_date,
            recordType=record.record_type,
            title=record.title,
            veterinarian=record.veterinarian,
            description=record.description,
            medications=record.medications,
            notes=record.notes,
            createdAt=record.created_at,
        )


# ============================================================================
# TRAINING SESSIONS
# ============================================================================


class TrainingSessionCreate(BaseModel):
    dogId: int
    sessionDate: UTCDateTime
    teacherId: Optional[int] = None
    appointmentId: Optional[int] = None
    duration: Optional[int] = None
    objective: Optional[str] = None
    activities: Optional[str] = None
    progress: Optional[str] = None
    behaviorNotes: Optional[str] = None
    nextSteps: Optional[str] = None
    rating: Optional[int] = None

    @field_validator("duration")
    @classmethod
    def check_duration(cls, v):
        return validate_positive(v, "Duration")

    @field_validator("rating")
    @classmethod
    def check_rating(cls, v):
        return _check_rating(v)


class TrainingSessionUpdate(BaseModel):
    sessionDate: Optional[UTCDateTime] = None
    appointmentId: Optional[int] = None
    duration: Optional[int] = None
    objective: Optional[str] = None
    activities: Optional[str] = None
    progress: Optional[str] = None
    behaviorNotes: Optional[str] = None
    nextSteps: Optional[str] = None
    rating: Optional[int] = None

    @field_validator("duration")
    @classmethod
    def check_duration(cls, v):
        return validate_positive(v, "Duration")

    @field_validator("rating")
    @classmethod
    def check_rating(cls, v):
        return _check_rating(v)


class TrainingSessionResponse(BaseModel):
    id: int
    dogId: int
    dogName: Optional[str] = None
    teacherId: Optional[int] = None
    teacherName: Optional[str] = None
    appointmentId: Optional[int] = None
    sessionDate: datetime
    duration: Optional[int] = None
    objective: Optional[str] = None
    activities: Optional[str] = None
    progress: Optional[str] = None
    behaviorNotes: Optional[str] = None
    nextSteps: Optional[str] = None
    rating: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_session(cls, session: TrainingSession) -> "TrainingSessionResponse":
        return cls(
            id=session.id,
            dogId=session.dog_id,
            dogName=session.dog.name if session.dog else None,
            teacherId=session.teacher_id,
            teacherName=session.teacher.full_name if session.teacher else None,
            appointmentId=session.appointment_id,
            sessionDate=session.session_date,
            duration=session.duration,
            objective=session.objective,
            activities=session.activities,
            progress=session.progress,
            behaviorNotes=session.behavior_notes,
            nextSteps=session.next_steps,
            rating=session.rating,
            createdAt=session.created_at,
        )


# ============================================================================
# EVIDENCE
# ============================================================================


class EvidenceCreate(BaseModel):
    dogId: int
    trainingSessionId: Optional[int] = None
    type: str
    title: str
    description: Optional[str] = None
    fileKey: Optional[str] = None

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, EVIDENCE_TYPES, "Evidence type")

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required_text(v, "Title")

    @model_validator(mode="after")
    def check_file(self):
        if self.type != "note" and not self.fileKey:
            raise ValueError("A file is required unless the evidence is a note")
        return self


class EvidenceResponse(BaseModel):
    id: int
    dogId: int
    trainingSessionId: Optional[int] = None
    type: str
    title: str
    description: Optional[str] = None
    fileKey: Optional[str] = None
    fileUrl: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_evidence(cls, evidence: Evidence) -> "EvidenceResponse":
        return cls(
            id=evidence.id,
            dogId=evidence.dog_id,
            trainingSessionId=evidence.training_session_id,
            type=evidence.type,
            title=evidence.title,
            description=evidence.description,
            fileKey=evidence.file_key,
            fileUrl=get_storage().url(evidence.file_key),
            createdAt=evidence.created_at,
        )


# ============================================================================
# PROGRESS
# ============================================================================


class ProgressEntryCreate(BaseModel):
    dogId: int
    appointmentId: Optional[int] = None
    title: str
    description: Optional[str] = None
    photos: list[str] = []
    videos: list[str] = []

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required_text(v, "Title")


class ProgressEntryUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    photos: Optional[list[str]] = None
    videos: Optional[list[str]] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return None if v is None else validate_required_text(v, "Title")


class ProgressEntryResponse(BaseModel):
    id: int
    dogId: int
    appointmentId: Optional[int] = None
    title: str
    description: Optional[str] = None
    photos: list[str] = []
    videos: list[str] = []
    photoUrls: list[str] = []
    videoUrls: list[str] = []
    createdAt: Optional[datetime] = None

    @classmethod
    def from_entry(cls, entry: ProgressEntry) -> "ProgressEntryResponse":
        storage = get_storage()
        photos = entry.photos or []
        videos = entry.videos or []
        return cls(
            id=entry.id,
            dogId=entry.dog_id,
            appointmentId=entry.appointment_id,
            title=entry.title,
            description=entry.description,
            photos=photos,
            videos=videos,
            photoUrls=[u for u in (storage.url(k) for k in photos) if u],
            videoUrls=[u for u in (storage.url(k) for k in videos) if u],
            createdAt=entry.created_at,
        )


# ============================================================================
# ASSESSMENTS
# ============================================================================


class AssessmentCreate(BaseModel):
    dogId: int
    assessmentDate: UTCDateTime
    scores: dict[str, int] = {}
    comments: dict[str, str] = {}

    @field_validator("scores")
    @classmethod
    def check_scores(cls, v):
        return validate_scores(v)

    @field_validator("comments")
    @classmethod
    def check_comments(cls, v):
        return validate_comments(v)


class AssessmentUpdate(BaseModel):
    assessmentDate: Optional[UTCDateTime] = None
    scores: Optional[dict[str, int]] = None
    comments: Optional[dict[str, str]] = None

    @field_validator("scores")
    @classmethod
    def check_scores(cls, v):
        return None if v is None else validate_scores(v)

    @field_validator("comments")
    @classmethod
    def check_comments(cls, v):
        return None if v is None else validate_comments(v)


def validate_scores(scores: dict[str, int]) -> dict[str, int]:
    unknown = sorted(set(scores) - SCORE_KEYS)
    if unknown:
        raise ValueError(f"Unknown assessment indicators: {', '.join(unknown)}")
    for key, value in scores.items():
        if not 1 <= value <= 5:
            raise ValueError(f"Score for {key} must be between 1 and 5")
    return scores


def validate_comments(comments: dict[str, str]) -> dict[str, str]:
    unknown = sorted(set(comments) - COMMENT_KEYS)
    if unknown:
        raise ValueError(f"Unknown assessment sections: {', '.join(unknown)}")
    return comments


def section_averages(scores: dict[str, int]) -> dict[str, Optional[float]]:
    """Average score per section, None where nothing in the section was scored"""
    averages = {}
    for section, keys in ASSESSMENT_SECTIONS.items():
        values = [scores[k] for k in keys if scores.get(k) is not None]
        averages[section] = round(sum(values) / len(values), 2) if values else None
    return averages


class AssessmentResponse(BaseModel):
    id: int
    dogId: int
    assessmentDate: datetime
    scores: dict[str, int]
    comments: dict[str, str]
    createdAt: Optional[datetime] = None

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> "AssessmentResponse":
        return cls(
            id=assessment.id,
            dogId=assessment.dog_id,
            assessmentDate=assessment.assessment_date,
            scores=assessment.scores or {},
            comments=assessment.comments or {},
            createdAt=assessment.created_at,
        )


class AssessmentSummary(BaseModel):
    assessmentId: int
    assessmentDate: datetime
    sections: dict[str, Optional[float]]
    overall: Optional[float] = None
