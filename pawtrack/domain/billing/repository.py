from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Appointment, Client, Service
from ...models_billing import Expense, Invoice, Payment


class BillingRepository:
    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    @staticmethod
    def _invoice_query(db: Session, business_id: int):
        return (
            db.query(Invoice)
            .options(
                joinedload(Invoice.client),
                selectinload(Invoice.items),
                selectinload(Invoice.payments),
            )
            .filter(Invoice.business_id == business_id)
        )

    @staticmethod
    def get_invoices(
        db: Session,
        business_id: int,
        status: Optional[str] = None,
        client_id: Optional[int] = None,
    ) -> list[Invoice]:
        query = BillingRepository._invoice_query(db, business_id)
        if status:
            query = query.filter(Invoice.status == status)
        if client_id is not None:
            query = query.filter(Invoice.client_id == client_id)
        return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()

    @staticmethod
    def get_invoice(db: Session, invoice_id: int, business_id: int) -> Optional[Invoice]:
        return (
            BillingRepository._invoice_query(db, business_id)
            .filter(Invoice.id == invoice_id)
            .first()
        )

    @staticmethod
    def get_overdue_candidates(db: Session, business_id: int, now: datetime) -> list[Invoice]:
        return (
            db.query(Invoice)
            .filter(
                Invoice.business_id == business_id,
                Invoice.status == "sent",
                Invoice.due_date.isnot(None),
                Invoice.due_date < now,
            )
            .all()
        )

    @staticmethod
    def get_invoice_numbers(db: Session, business_id: int, prefix: str) -> list[str]:
        rows = (
            db.query(Invoice.invoice_number)
            .filter(
                Invoice.business_id == business_id,
                Invoice.invoice_number.like(f"{prefix}%"),
            )
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def create_invoice(db: Session, invoice: Invoice) -> Invoice:
        db.add(invoice)
        db.commit()
        return invoice

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    @staticmethod
    def get_payments(
        db: Session, business_id: int, client_id: Optional[int] = None
    ) -> list[Payment]:
        query = (
            db.query(Payment)
            .options(joinedload(Payment.client), joinedload(Payment.invoice))
            .filter(Payment.business_id == business_id)
        )
        if client_id is not None:
            query = query.filter(Payment.client_id == client_id)
        return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

    @staticmethod
    def get_payment(db: Session, payment_id: int, business_id: int) -> Optional[Payment]:
        return (
            db.query(Payment)
            .options(joinedload(Payment.client), joinedload(Payment.invoice))
            .filter(Payment.id == payment_id, Payment.business_id == business_id)
            .first()
        )

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    @staticmethod
    def get_expenses(
        db: Session,
        business_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> list[Expense]:
        query = db.query(Expense).filter(Expense.business_id == business_id)
        if start is not None:
            query = query.filter(Expense.expense_date >= start)
        if end is not None:
            query = query.filter(Expense.expense_date <= end)
        if category:
            query = query.filter(Expense.category == category)
        return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()

    @staticmethod
    def get_expense(db: Session, expense_id: int, business_id: int) -> Optional[Expense]:
        return (
            db.query(Expense)
            .filter(Expense.id == expense_id, Expense.business_id == business_id)
            .first()
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def get_client(db: Session, client_id: int, business_id: int) -> Optional[Client]:
        return (
            db.query(Client)
            .filter(Client.id == client_id, Client.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_appointment(db: Session, appointment_id: int, business_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_service(db: Session, service_id: int, business_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business_id)
            .first()
        )

    @staticmethod
    def save(db: Session, obj):
        db.add(obj)
        db.commit()
        return obj

    @staticmethod
    def delete(db: Session, obj) -> None:
        db.delete(obj)
        db.commit()
