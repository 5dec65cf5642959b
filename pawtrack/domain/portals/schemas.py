from typing import Optional

from pydantic import BaseModel

from ..appointments.schemas import AppointmentResponse
from ..clients.schemas import ClientResponse
from ..pets.schemas import DogResponse


class ClientProfileResponse(BaseModel):
    client: ClientResponse
    dogs: list[DogResponse]


class TeacherStats(BaseModel):
    monthlySessions: int
    sessionsThisWeek: int
    sessionsLastWeek: int
    weeklyGrowth: Optional[float] = None
    assignedDogs: int
    todayAppointments: int


class TeacherTodayResponse(BaseModel):
    date: str
    appointments: list[AppointmentResponse]
