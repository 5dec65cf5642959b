from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_client, require_staff
from ...database import get_db
from ...models import User
from ...shared.validators import utcnow
from ..appointments.schemas import AppointmentResponse
from ..billing.schemas import InvoiceResponse, PaymentResponse
from ..clients.schemas import ClientResponse
from ..packages.schemas import PackageResponse
from ..pets.schemas import DogRecordResponse, DogResponse
from ..records.schemas import TrainingSessionResponse
from .schemas import ClientProfileResponse, TeacherStats, TeacherTodayResponse
from .service import ClientPortalService, TeacherPortalService

router = APIRouter(prefix="/portal", tags=["Portals"])


def get_client_portal_service(db: Session = Depends(get_db)) -> ClientPortalService:
    return ClientPortalService(db)


def get_teacher_portal_service(db: Session = Depends(get_db)) -> TeacherPortalService:
    return TeacherPortalService(db)


# ============================================================================
# CLIENT PORTAL
# ============================================================================


@router.get("/client/profile", response_model=ClientProfileResponse)
async def get_client_profile(
    current_user: User = Depends(require_client),
    service: ClientPortalService = Depends(get_client_portal_service),
):
    client, dogs = service.get_dogs(current_user)
    return ClientProfileResponse(
        client=ClientResponse.from_client(client),
        dogs=[DogResponse.from_dog(d) for d in dogs],
    )


@router.get("/client/appointments", response_model=list[AppointmentResponse])
async def get_client_appointments(
    current_user: User = Depends(require_client),
    service: ClientPortalService = Depends(get_client_portal_service),
):
    return [AppointmentResponse.from_appointment(a) for a in service.get_appointments(current_user)]


@router.get("/client/invoices", response_model=list[InvoiceResponse])
async def get_client_invoices(
    current_user: User = Depends(require_client),
    service: ClientPortalService = Depends(get_client_portal_service),
):
    return [InvoiceResponse.from_invoice(i) for i in service.get_invoices(current_user)]


@router.get("/client/payments", response_model=list[PaymentResponse])
async def get_client_payments(
    current_user: User = Depends(require_client),
    service: ClientPortalService = Depends(get_client_portal_service),
):
    return [PaymentResponse.from_payment(p) for p in service.get_payments(current_user)]


@router.get("/client/packages", response_model=list[PackageResponse])
async def get_client_packages(
    current_user: User = Depends(require_client),
    service: ClientPortalService = Depends(get_client_portal_service),
):
    return [PackageResponse.from_package(p) for p in service.get_packages(current_user)]


@router.get("/client/dogs/{dog_id}/record", response_model=DogRecordResponse)
async def get_client_dog_record(
    dog_id: int,
    current_user: User = Depends(require_client),
    service: ClientPortalService = Depends(get_client_portal_service),
):
    return service.get_dog_record(dog_id, current_user)


# ============================================================================
# TEACHER PORTAL
# ============================================================================


@router.get("/teacher/today", response_model=TeacherTodayResponse)
async def get_teacher_today(
    current_user: User = Depends(require_staff),
    service: TeacherPortalService = Depends(get_teacher_portal_service),
):
    appointments = service.get_today_appointments(current_user)
    return TeacherTodayResponse(
        date=utcnow().date().isoformat(),
        appointments=[AppointmentResponse.from_appointment(a) for a in appointments],
    )


@router.get("/teacher/appointments", response_model=list[AppointmentResponse])
async def get_teacher_appointments(
    current_user: User = Depends(require_staff),
    service: TeacherPortalService = Depends(get_teacher_portal_service),
):
    return [AppointmentResponse.from_appointment(a) for a in service.get_appointments(current_user)]


@router.get("/teacher/dogs", response_model=list[DogResponse])
async def get_teacher_dogs(
    current_user: User = Depends(require_staff),
    service: TeacherPortalService = Depends(get_teacher_portal_service),
):
    return [DogResponse.from_dog(d) for d in service.get_dogs(current_user)]


@router.get("/teacher/recent-notes", response_model=list[TrainingSessionResponse])
async def get_teacher_recent_notes(
    current_user: User = Depends(require_staff),
    service: TeacherPortalService = Depends(get_teacher_portal_service),
):
    return [TrainingSessionResponse.from_session(s) for s in service.get_recent_notes(current_user)]


@router.get("/teacher/stats", response_model=TeacherStats)
async def get_teacher_stats(
    current_user: User = Depends(require_staff),
    service: TeacherPortalService = Depends(get_teacher_portal_service),
):
    return service.get_stats(current_user)
