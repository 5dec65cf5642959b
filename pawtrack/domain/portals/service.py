"""
Portal services - read-only views for clients and teachers.

The client portal only ever resolves data through the client record linked
to the logged-in user; the teacher portal is scoped to the caller's
assignments.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, Client, Dog, User
from ...models_billing import Invoice, Package, Payment
from ...models_records import TrainingSession
from ...shared.validators import utcnow
from ..appointments.repository import AppointmentRepository
from ..billing.service import BillingService
from ..packages.repository import PackageRepository
from ..pets.repository import PetRepository
from ..pets.schemas import DogRecordResponse
from ..pets.service import PetService
from ..records.repository import RecordRepository
from .repository import PortalRepository
from .schemas import TeacherStats

logger = logging.getLogger(__name__)

RECENT_NOTES_LIMIT = 10


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def growth_percentage(current: int, previous: int) -> Optional[float]:
    """Week-over-week change; None when there is nothing to compare against"""
    if previous == 0:
        return None if current == 0 else 100.0
    return round((current - previous) / previous * 100, 1)


class ClientPortalService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PortalRepository()

    def get_client(self, user: User) -> Client:
        client = self.repo.get_client_for_user(self.db, user.id, user.business_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client profile not found")
        return client

    def get_dogs(self, user: User) -> tuple[Client, list[Dog]]:
        client = self.get_client(user)
        return client, PetRepository.get_dogs(self.db, user.business_id, client_id=client.id)

    def get_appointments(self, user: User) -> list[Appointment]:
        client = self.get_client(user)
        return AppointmentRepository.get_appointments(
            self.db, user.business_id, client_id=client.id
        )

    def get_invoices(self, user: User) -> list[Invoice]:
        client = self.get_client(user)
        return BillingService(self.db).get_invoices(user, client_id=client.id)

    def get_payments(self, user: User) -> list[Payment]:
        client = self.get_client(user)
        return BillingService(self.db).get_payments(user, client_id=client.id)

    def get_packages(self, user: User) -> list[Package]:
        client = self.get_client(user)
        return PackageRepository.get_packages(self.db, user.business_id, client_id=client.id)

    def get_dog_record(self, dog_id: int, user: User) -> DogRecordResponse:
        client = self.get_client(user)
        pets = PetService(self.db)
        dog = pets.repo.get_dog(self.db, dog_id, user.business_id)
        if not dog or dog.client_id != client.id:
            raise HTTPException(status_code=404, detail="Dog not found")
        return pets.complete_record(dog.id, user)


class TeacherPortalService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PortalRepository()

    def get_today_appointments(self, user: User, now: Optional[datetime] = None) -> list[Appointment]:
        today = start_of_day(now or utcnow())
        return self.repo.get_teacher_appointments(
            self.db, user.id, user.business_id, today, today + timedelta(days=1)
        )

    def get_appointments(self, user: User) -> list[Appointment]:
        return self.repo.get_teacher_appointments(self.db, user.id, user.business_id)

    def get_dogs(self, user: User) -> list[Dog]:
        return PetRepository.get_dogs(self.db, user.business_id, teacher_id=user.id)

    def get_recent_notes(self, user: User) -> list[TrainingSession]:
        return RecordRepository.get_sessions_by_teacher(
            self.db, user.id, user.business_id, RECENT_NOTES_LIMIT
        )

    def get_stats(self, user: User, now: Optional[datetime] = None) -> TeacherStats:
        now = now or utcnow()
        today = start_of_day(now)
        month_start = today.replace(day=1)
        week_start = today - timedelta(days=today.weekday())
        last_week_start = week_start - timedelta(days=7)

        count = self.repo.count_sessions
        this_week = count(self.db, user.id, user.business_id, week_start, week_start + timedelta(days=7))
        last_week = count(self.db, user.id, user.business_id, last_week_start, week_start)
        next_month = (month_start + timedelta(days=32)).replace(day=1)

        return TeacherStats(
            monthlySessions=count(self.db, user.id, user.business_id, month_start, next_month),
            sessionsThisWeek=this_week,
            sessionsLastWeek=last_week,
            weeklyGrowth=growth_percentage(this_week, last_week),
            assignedDogs=self.repo.count_assigned_dogs(self.db, user.id, user.business_id),
            todayAppointments=len(self.get_today_appointments(user, now)),
        )
