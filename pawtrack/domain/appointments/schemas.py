"""Appointment and calendar schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import APPOINTMENT_STATUSES, Appointment
from ...shared.validators import UTCDateTime, format_money, validate_choice, validate_non_negative


class AppointmentCreate(BaseModel):
    clientId: int
    dogId: int
    serviceId: int
    teacherId: Optional[int] = None
    appointmentDate: UTCDateTime
    status: str = "pending"
    notes: Optional[str] = None
    price: Optional[Decimal] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, APPOINTMENT_STATUSES, "Status")

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return validate_non_negative(v, "Price")


class AppointmentUpdate(BaseModel):
    clientId: Optional[int] = None
    dogId: Optional[int] = None
    serviceId: Optional[int] = None
    teacherId: Optional[int] = None
    appointmentDate: Optional[UTCDateTime] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    price: Optional[Decimal] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, APPOINTMENT_STATUSES, "Status")

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return validate_non_negative(v, "Price")


class PartySummary(BaseModel):
    id: int
    name: str


class ServiceSummary(BaseModel):
    id: int
    name: str
    type: str


class AppointmentResponse(BaseModel):
    id: int
    clientId: int
    dogId: int
    serviceId: int
    teacherId: Optional[int] = None
    appointmentDate: datetime
    status: str
    notes: Optional[str] = None
    price: Optional[str] = None
    client: Optional[PartySummary] = None
    dog: Optional[PartySummary] = None
    service: Optional[ServiceSummary] = None
    teacherName: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_appointment(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            clientId=appointment.client_id,
            dogId=appointment.dog_id,
            serviceId=appointment.service_id,
            teacherId=appointment.teacher_id,
            appointmentDate=appointment.appointment_date,
            status=appointment.status,
            notes=appointment.notes,
            price=format_money(appointment.price) if appointment.price is not None else None,
            client=(
                PartySummary(id=appointment.client.id, name=appointment.client.full_name)
                if appointment.client
                else None
            ),
            dog=(
                PartySummary(id=appointment.dog.id, name=appointment.dog.name)
                if appointment.dog
                else None
            ),
            service=(
                ServiceSummary(
                    id=appointment.service.id,
                    name=appointment.service.name,
                    type=appointment.service.type,
                )
                if appointment.service
                else None
            ),
            teacherName=appointment.teacher.full_name if appointment.teacher else None,
            createdAt=appointment.created_at,
        )


class CalendarTask(BaseModel):
    id: int
    title: str
    type: str
    status: str
    priority: str
    startAt: datetime
    endAt: Optional[datetime] = None
    assignedTo: Optional[int] = None


class CalendarDay(BaseModel):
    date: str
    appointments: list[AppointmentResponse] = []
    tasks: list[CalendarTask] = []
    appointmentCount: int = 0
    taskCount: int = 0


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    days: list[CalendarDay]
    totalAppointments: int
    totalTasks: int
