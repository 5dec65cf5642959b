"""Appointment service - scheduling rules and the monthly calendar"""

import calendar
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, User
from ...shared.validators import to_naive_utc
from .repository import AppointmentRepository
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    CalendarDay,
    CalendarMonthResponse,
    CalendarTask,
)

logger = logging.getLogger(__name__)

FINAL_STATUSES = ("completed", "cancelled", "no_show")


def parse_range(start: Optional[datetime], end: Optional[datetime]) -> tuple[datetime, datetime]:
    """Validate a start/end query pair shared by the range endpoints"""
    if start is None or end is None:
        raise HTTPException(status_code=400, detail="start and end dates are required")
    start, end = to_naive_utc(start), to_naive_utc(end)
    if start > end:
        raise HTTPException(status_code=400, detail="start date must be before end date")
    return start, end


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_appointments(
        self,
        user: User,
        status: Optional[str] = None,
        client_id: Optional[int] = None,
        dog_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
    ) -> list[Appointment]:
        return self.repo.get_appointments(
            self.db, user.business_id, status, client_id, dog_id, teacher_id
        )

    def get_appointments_in_range(
        self, user: User, start: Optional[datetime], end: Optional[datetime]
    ) -> list[Appointment]:
        start, end = parse_range(start, end)
        return self.repo.get_appointments_in_range(self.db, user.business_id, start, end)

    def get_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id, user.business_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def _check_parties(self, business_id: int, client_id: int, dog_id: int):
        client = self.repo.get_client(self.db, client_id, business_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        dog = self.repo.get_dog(self.db, dog_id, business_id)
        if not dog:
            raise HTTPException(status_code=404, detail="Dog not found")
        if dog.client_id != client.id:
            raise HTTPException(
                status_code=400, detail="Dog does not belong to the selected client"
            )

    def _check_service(self, business_id: int, service_id: int):
        service = self.repo.get_service(self.db, service_id, business_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        if not service.is_active:
            raise HTTPException(status_code=400, detail="Service is not active")
        return service

    def _check_teacher(self, business_id: int, teacher_id: Optional[int]):
        if teacher_id is not None and not self.repo.get_staff_user(
            self.db, teacher_id, business_id
        ):
            raise HTTPException(
                status_code=400, detail="Assigned teacher must be a teacher of this business"
            )

    def create_appointment(self, data: AppointmentCreate, user: User) -> Appointment:
        self._check_parties(user.business_id, data.clientId, data.dogId)
        service = self._check_service(user.business_id, data.serviceId)
        self._check_teacher(user.business_id, data.teacherId)

        appointment = self.repo.create_appointment(
            self.db,
            user.business_id,
            client_id=data.clientId,
            dog_id=data.dogId,
            service_id=data.serviceId,
            teacher_id=data.teacherId,
            appointment_date=data.appointmentDate,
            status=data.status,
            notes=data.notes,
            price=data.price if data.price is not None else service.price,
        )
        logger.info(
            f"📅 Appointment {appointment.id} created for dog {data.dogId} on {data.appointmentDate}"
        )
        return self.get_appointment(appointment.id, user)

    def update_appointment(
        self, appointment_id: int, data: AppointmentUpdate, user: User
    ) -> Appointment:
        appointment = self.get_appointment(appointment_id, user)
        fields = data.model_dump(exclude_unset=True)
        updates = {}

        client_id = fields.get("clientId") or appointment.client_id
        dog_id = fields.get("dogId") or appointment.dog_id
        if "clientId" in fields or "dogId" in fields:
            self._check_parties(user.business_id, client_id, dog_id)
            updates["client_id"] = client_id
            updates["dog_id"] = dog_id

        if fields.get("serviceId") and fields["serviceId"] != appointment.service_id:
            service = self._check_service(user.business_id, fields["serviceId"])
            updates["service_id"] = service.id
            if fields.get("price") is None:
                updates["price"] = service.price

        if "teacherId" in fields:
            self._check_teacher(user.business_id, fields["teacherId"])
            updates["teacher_id"] = fields["teacherId"]

        new_status = fields.get("status")
        if new_status and new_status != appointment.status:
            if appointment.status in FINAL_STATUSES and new_status == "pending":
                raise HTTPException(
                    status_code=400,
                    detail=f"Cannot move a {appointment.status} appointment back to pending",
                )
            logger.info(f"🔄 Appointment {appointment.id}: {appointment.status} -> {new_status}")
            updates["status"] = new_status

        if fields.get("appointmentDate") is not None:
            updates["appointment_date"] = fields["appointmentDate"]
        if "notes" in fields:
            updates["notes"] = fields["notes"]
        if fields.get("price") is not None:
            updates["price"] = fields["price"]

        self.repo.update_appointment(self.db, appointment, **updates)
        return self.get_appointment(appointment.id, user)

    def delete_appointment(self, appointment_id: int, user: User) -> dict:
        appointment = self.get_appointment(appointment_id, user)
        self.repo.delete_appointment(self.db, appointment)
        logger.info(f"🗑️ Appointment {appointment_id} deleted")
        return {"message": "Appointment deleted"}

    def get_calendar_month(self, year: int, month: int, user: User) -> CalendarMonthResponse:
        """Appointments and tasks of one month grouped by day"""
        if not 1 <= month <= 12:
            raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
        if not 1 <= year <= 9998:
            raise HTTPException(status_code=400, detail="Year must be between 1 and 9998")
        start = datetime(year, month, 1)
        last_day = calendar.monthrange(year, month)[1]
        end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)

        appointments = self.repo.get_appointments_in_range(
            self.db, user.business_id, start, end, inclusive_end=False
        )
        tasks = self.repo.get_tasks_in_range(
            self.db,
            user.business_id,
            start,
            end,
            assigned_to=user.id if user.role == "teacher" else None,
        )

        days: "OrderedDict[str, CalendarDay]" = OrderedDict()
        for day in range(1, last_day + 1):
            key = datetime(year, month, day).date().isoformat()
            days[key] = CalendarDay(date=key)

        for appointment in appointments:
            entry = days[appointment.appointment_date.date().isoformat()]
            entry.appointments.append(AppointmentResponse.from_appointment(appointment))
            entry.appointmentCount += 1

        for task in tasks:
            entry = days[task.start_at.date().isoformat()]
            entry.tasks.append(
                CalendarTask(
                    id=task.id,
                    title=task.title,
                    type=task.type,
                    status=task.status,
                    priority=task.priority,
                    startAt=task.start_at,
                    endAt=task.end_at,
                    assignedTo=task.assigned_to,
                )
            )
            entry.taskCount += 1

        return CalendarMonthResponse(
            year=year,
            month=month,
            days=[d for d in days.values() if d.appointmentCount or d.taskCount],
            totalAppointments=len(appointments),
            totalTasks=len(tasks),
        )
