"""Record router - medical records, training sessions, evidence, progress and assessments"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_staff
from ...database import get_db
from ...models import User
from .schemas import (
    AssessmentCreate,
    AssessmentResponse,
    AssessmentSummary,
    AssessmentUpdate,
    EvidenceCreate,
    EvidenceResponse,
    MedicalRecordCreate,
    MedicalRecordResponse,
    MedicalRecordUpdate,
    ProgressEntryCreate,
    ProgressEntryResponse,
    ProgressEntryUpdate,
    TrainingSessionCreate,
    TrainingSessionResponse,
    TrainingSessionUpdate,
)
from .service import RecordService

router = APIRouter(tags=["Records"])


def get_record_service(db: Session = Depends(get_db)) -> RecordService:
    return RecordService(db)


# ============================================================================
# MEDICAL RECORDS
# ============================================================================


@router.get("/dogs/{dog_id}/medical-records", response_model=list[MedicalRecordResponse])
async def get_medical_records(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return [
        MedicalRecordResponse.from_record(r)
        for r in service.get_medical_records(dog_id, current_user)
    ]


@router.post("/medical-records", response_model=MedicalRecordResponse, status_code=201)
async def create_medical_record(
    data: MedicalRecordCreate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return MedicalRecordResponse.from_record(service.create_medical_record(data, current_user))


@router.get("/medical-records/{record_id}", response_model=MedicalRecordResponse)
async def get_medical_record(
    record_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return MedicalRecordResponse.from_record(service.get_medical_record(record_id, current_user))


@router.patch("/medical-records/{record_id}", response_model=MedicalRecordResponse)
async def update_medical_record(
    record_id: int,
    data: MedicalRecordUpdate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return MedicalRecordResponse.from_record(
        service.update_medical_record(record_id, data, current_user)
    )


@router.delete("/medical-records/{record_id}")
async def delete_medical_record(
    record_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return service.delete_medical_record(record_id, current_user)


# ============================================================================
# TRAINING SESSIONS
# ============================================================================


@router.get("/dogs/{dog_id}/training-sessions", response_model=list[TrainingSessionResponse])
async def get_training_sessions(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return [
        TrainingSessionResponse.from_session(s)
        for s in service.get_training_sessions(dog_id, current_user)
    ]


@router.post("/training-sessions", response_model=TrainingSessionResponse, status_code=201)
async def create_training_session(
    data: TrainingSessionCreate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return TrainingSessionResponse.from_session(
        service.create_training_session(data, current_user)
    )


@router.get("/training-sessions/{session_id}", response_model=TrainingSessionResponse)
async def get_training_session(
    session_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return TrainingSessionResponse.from_session(
        service.get_training_session(session_id, current_user)
    )


@router.patch("/training-sessions/{session_id}", response_model=TrainingSessionResponse)
async def update_training_session(
    session_id: int,
    data: TrainingSessionUpdate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return TrainingSessionResponse.from_session(
        service.update_training_session(session_id, data, current_user)
    )


@router.delete("/training-sessions/{session_id}")
async def delete_training_session(
    session_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return service.delete_training_session(session_id, current_user)


@router.get("/training-sessions/{session_id}/evidence", response_model=list[EvidenceResponse])
async def get_session_evidence(
    session_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return [
        EvidenceResponse.from_evidence(e)
        for e in service.get_evidence_for_session(session_id, current_user)
    ]


# ============================================================================
# EVIDENCE
# ============================================================================


@router.get("/dogs/{dog_id}/evidence", response_model=list[EvidenceResponse])
async def get_dog_evidence(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return [
        EvidenceResponse.from_evidence(e) for e in service.get_evidence_for_dog(dog_id, current_user)
    ]


@router.post("/evidence", response_model=EvidenceResponse, status_code=201)
async def create_evidence(
    data: EvidenceCreate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return EvidenceResponse.from_evidence(service.create_evidence(data, current_user))


@router.get("/evidence/{evidence_id}", response_model=EvidenceResponse)
async def get_evidence(
    evidence_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return EvidenceResponse.from_evidence(service.get_evidence(evidence_id, current_user))


@router.delete("/evidence/{evidence_id}")
async def delete_evidence(
    evidence_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return service.delete_evidence(evidence_id, current_user)


# ============================================================================
# PROGRESS
# ============================================================================


@router.get("/dogs/{dog_id}/progress", response_model=list[ProgressEntryResponse])
async def get_progress_entries(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return [
        ProgressEntryResponse.from_entry(e)
        for e in service.get_progress_entries(dog_id, current_user)
    ]


@router.post("/progress", response_model=ProgressEntryResponse, status_code=201)
async def create_progress_entry(
    data: ProgressEntryCreate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return ProgressEntryResponse.from_entry(service.create_progress_entry(data, current_user))


@router.patch("/progress/{entry_id}", response_model=ProgressEntryResponse)
async def update_progress_entry(
    entry_id: int,
    data: ProgressEntryUpdate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return ProgressEntryResponse.from_entry(
        service.update_progress_entry(entry_id, data, current_user)
    )


@router.delete("/progress/{entry_id}")
async def delete_progress_entry(
    entry_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return service.delete_progress_entry(entry_id, current_user)


# ============================================================================
# ASSESSMENTS
# ============================================================================


@router.get("/dogs/{dog_id}/assessments", response_model=list[AssessmentResponse])
async def get_assessments(
    dog_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return [
        AssessmentResponse.from_assessment(a) for a in service.get_assessments(dog_id, current_user)
    ]


@router.post("/assessments", response_model=AssessmentResponse, status_code=201)
async def create_assessment(
    data: AssessmentCreate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return AssessmentResponse.from_assessment(service.create_assessment(data, current_user))


@router.get("/assessments/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return AssessmentResponse.from_assessment(service.get_assessment(assessment_id, current_user))


@router.get("/assessments/{assessment_id}/summary", response_model=AssessmentSummary)
async def get_assessment_summary(
    assessment_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    """Average score per section of one assessment"""
    return service.get_assessment_summary(assessment_id, current_user)


@router.patch("/assessments/{assessment_id}", response_model=AssessmentResponse)
async def update_assessment(
    assessment_id: int,
    data: AssessmentUpdate,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return AssessmentResponse.from_assessment(
        service.update_assessment(assessment_id, data, current_user)
    )


@router.delete("/assessments/{assessment_id}")
async def delete_assessment(
    assessment_id: int,
    current_user: User = Depends(require_staff),
    service: RecordService = Depends(get_record_service),
):
    return service.delete_assessment(assessment_id, current_user)
