"""Appointment router - appointments and the calendar view"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    CalendarMonthResponse,
)
from .service import AppointmentService

router = APIRouter(tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


@router.get("/appointments", response_model=list[AppointmentResponse])
async def get_appointments(
    status: Optional[str] = Query(None),
    client_id: Optional[int] = Query(None, alias="clientId"),
    dog_id: Optional[int] = Query(None, alias="dogId"),
    teacher_id: Optional[int] = Query(None, alias="teacherId"),
    current_user: User = Depends(require_staff),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.get_appointments(current_user, status, client_id, dog_id, teacher_id)
    return [AppointmentResponse.from_appointment(a) for a in appointments]


@router.get("/appointments/range", response_model=list[AppointmentResponse])
async def get_appointments_in_range(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    current_user: User = Depends(require_staff),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments between two dates, oldest first"""
    appointments = service.get_appointments_in_range(current_user, start, end)
    return [AppointmentResponse.from_appointment(a) for a in appointments]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    current_user: User = Depends(require_staff),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(
        service.get_appointment(appointment_id, current_user)
    )


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(require_staff),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(service.create_appointment(data, current_user))


@router.patch("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_user: User = Depends(require_staff),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(
        service.update_appointment(appointment_id, data, current_user)
    )


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id, current_user)


@router.get("/calendar/{year}/{month}", response_model=CalendarMonthResponse)
async def get_calendar_month(
    year: int,
    month: int,
    current_user: User = Depends(require_staff),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_calendar_month(year, month, current_user)
