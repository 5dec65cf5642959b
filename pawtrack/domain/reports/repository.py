"""Aggregate queries behind the dashboard and financial reports"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, Service
from ...models_billing import Expense, Invoice, Package


class ReportRepository:
    @staticmethod
    def count_appointments(db: Session, business_id: int, start: datetime, end: datetime) -> int:
        return (
            db.query(func.count(Appointment.id))
            .filter(
                Appointment.business_id == business_id,
                Appointment.appointment_date >= start,
                Appointment.appointment_date < end,
            )
            .scalar()
        )

    @staticmethod
    def completed_revenue(
        db: Session, business_id: int, start: datetime, end: datetime, inclusive_end: bool = True
    ) -> Decimal:
        before_end = (
            Appointment.appointment_date <= end if inclusive_end else Appointment.appointment_date < end
        )
        total = (
            db.query(func.coalesce(func.sum(Appointment.price), 0))
            .filter(
                Appointment.business_id == business_id,
                Appointment.status == "completed",
                Appointment.appointment_date >= start,
                before_end,
            )
            .scalar()
        )
        return Decimal(str(total or 0))

    @staticmethod
    def count_active_clients(db: Session, business_id: int, since: datetime) -> int:
        return (
            db.query(func.count(func.distinct(Appointment.client_id)))
            .filter(
                Appointment.business_id == business_id,
                Appointment.appointment_date >= since,
            )
            .scalar()
        )

    @staticmethod
    def count_boarding_dogs(db: Session, business_id: int) -> int:
        return (
            db.query(func.count(func.distinct(Appointment.dog_id)))
            .join(Service, Appointment.service_id == Service.id)
            .filter(
                Appointment.business_id == business_id,
                Appointment.status == "confirmed",
                Service.type == "boarding",
            )
            .scalar()
        )

    @staticmethod
    def count_invoices(db: Session, business_id: int, statuses: tuple) -> int:
        return (
            db.query(func.count(Invoice.id))
            .filter(Invoice.business_id == business_id, Invoice.status.in_(statuses))
            .scalar()
        )

    @staticmethod
    def count_packages(db: Session, business_id: int, statuses: tuple) -> int:
        return (
            db.query(func.count(Package.id))
            .filter(Package.business_id == business_id, Package.status.in_(statuses))
            .scalar()
        )

    @staticmethod
    def service_breakdown(db: Session, business_id: int, start: datetime, end: datetime):
        return (
            db.query(
                Service.id,
                Service.name,
                Service.type,
                func.coalesce(func.sum(Appointment.price), 0),
                func.count(Appointment.id),
            )
            .join(Appointment, Appointment.service_id == Service.id)
            .filter(
                Appointment.business_id == business_id,
                Appointment.status == "completed",
                Appointment.appointment_date >= start,
                Appointment.appointment_date <= end,
            )
            .group_by(Service.id, Service.name, Service.type)
            .order_by(func.sum(Appointment.price).desc())
            .all()
        )

    @staticmethod
    def expense_breakdown(db: Session, business_id: int, start: datetime, end: datetime):
        return (
            db.query(Expense.category, func.coalesce(func.sum(Expense.amount), 0), func.count(Expense.id))
            .filter(
                Expense.business_id == business_id,
                Expense.expense_date >= start,
                Expense.expense_date <= end,
            )
            .group_by(Expense.category)
            .order_by(Expense.category)
            .all()
        )
