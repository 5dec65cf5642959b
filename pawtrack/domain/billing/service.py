"""
Billing service - invoices, payments and expenses.

Invoice amounts are always derived from their items on the server. Payments
settle invoices automatically once the paid total reaches the invoice amount.
"""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...models_billing import Expense, Invoice, InvoiceItem, Payment
from ...shared.validators import utcnow
from ...utils.storage import get_storage, validate_owned_key
from .repository import BillingRepository
from .schemas import (
    ExpenseCreate,
    ExpenseUpdate,
    InvoiceCreate,
    InvoiceUpdate,
    PaymentCreate,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

DELETABLE_INVOICE_STATUSES = ("draft", "cancelled")


def next_invoice_number(existing: list[str], prefix: str) -> str:
    """Next INV-YYYYMMDD-NNNN number given the numbers already issued for that day"""
    highest = 0
    for number in existing:
        suffix = number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"


class BillingService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()

    # ========================================================================
    # INVOICES
    # ========================================================================

    def refresh_overdue(self, business_id: int) -> int:
        """Flip sent invoices whose due date has passed to overdue"""
        invoices = self.repo.get_overdue_candidates(self.db, business_id, utcnow())
        for invoice in invoices:
            invoice.status = "overdue"
        if invoices:
            self.db.commit()
            logger.info(f"⏰ Marked {len(invoices)} invoice(s) overdue for business {business_id}")
        return len(invoices)

    def get_invoices(
        self, user: User, status: Optional[str] = None, client_id: Optional[int] = None
    ) -> list[Invoice]:
        self.refresh_overdue(user.business_id)
        return self.repo.get_invoices(self.db, user.business_id, status, client_id)

    def get_invoice(self, invoice_id: int, user: User) -> Invoice:
        self.refresh_overdue(user.business_id)
        invoice = self.repo.get_invoice(self.db, invoice_id, user.business_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return invoice

    def _build_items(self, data: InvoiceCreate, business_id: int) -> list[InvoiceItem]:
        items = []
        for item in data.items:
            if item.appointmentId is not None:
                appointment = self.repo.get_appointment(self.db, item.appointmentId, business_id)
                if not appointment:
                    raise HTTPException(status_code=404, detail="Appointment not found")
                if appointment.client_id != data.clientId:
                    raise HTTPException(
                        status_code=400,
                        detail="Appointment does not belong to the invoiced client",
                    )
            if item.serviceId is not None and not self.repo.get_service(
                self.db, item.serviceId, business_id
            ):
                raise HTTPException(status_code=404, detail="Service not found")

            items.append(
                InvoiceItem(
                    appointment_id=item.appointmentId,
                    service_id=item.serviceId,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unitPrice,
                    total_price=(Decimal(item.unitPrice) * item.quantity).quantize(
                        CENTS, rounding=ROUND_HALF_UP
                    ),
                )
            )
        return items

    def create_invoice(self, data: InvoiceCreate, user: User) -> Invoice:
        if not self.repo.get_client(self.db, data.clientId, user.business_id):
            raise HTTPException(status_code=404, detail="Client not found")

        items = self._build_items(data, user.business_id)
        if items:
            amount = sum((i.total_price for i in items), Decimal("0"))
        elif data.amount is not None and data.amount > 0:
            amount = data.amount
        else:
            raise HTTPException(
                status_code=400,
                detail="An invoice without items requires an amount greater than 0",
            )

        now = utcnow()
        prefix = f"INV-{now:%Y%m%d}-"
        number = next_invoice_number(
            self.repo.get_invoice_numbers(self.db, user.business_id, prefix), prefix
        )

        invoice = Invoice(
            business_id=user.business_id,
            client_id=data.clientId,
            invoice_number=number,
            amount=amount,
            status=data.status,
            due_date=data.dueDate,
            paid_date=now if data.status == "paid" else None,
            notes=data.notes,
            items=items,
        )
        self.repo.create_invoice(self.db, invoice)
        logger.info(f"🧾 Invoice {number} created for client {data.clientId}: {amount}")
        return self.get_invoice(invoice.id, user)

    def update_invoice(self, invoice_id: int, data: InvoiceUpdate, user: User) -> Invoice:
        invoice = self.get_invoice(invoice_id, user)
        fields = data.model_dump(exclude_unset=True)

        if "dueDate" in fields:
            invoice.due_date = fields["dueDate"]
        if "notes" in fields:
            invoice.notes = fields["notes"]

        status = fields.get("status")
        if status and status != invoice.status:
            if status == "paid":
                invoice.paid_date = utcnow()
            elif invoice.status == "paid":
                invoice.paid_date = None
            logger.info(f"🧾 Invoice {invoice.invoice_number}: {invoice.status} -> {status}")
            invoice.status = status

        self.db.commit()
        return self.get_invoice(invoice.id, user)

    def delete_invoice(self, invoice_id: int, user: User) -> dict:
        invoice = self.get_invoice(invoice_id, user)
        if invoice.status not in DELETABLE_INVOICE_STATUSES:
            raise HTTPException(
                status_code=400, detail="Only draft or cancelled invoices can be deleted"
            )
        if invoice.payments:
            raise HTTPException(
                status_code=400, detail="Invoices with recorded payments cannot be deleted"
            )
        number = invoice.invoice_number
        self.repo.delete(self.db, invoice)
        logger.info(f"🗑️ Invoice {number} deleted")
        return {"message": "Invoice deleted"}

    # ========================================================================
    # PAYMENTS
    # ========================================================================

    def get_payments(self, user: User, client_id: Optional[int] = None) -> list[Payment]:
        return self.repo.get_payments(self.db, user.business_id, client_id)

    def get_payment(self, payment_id: int, user: User) -> Payment:
        payment = self.repo.get_payment(self.db, payment_id, user.business_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        return payment

    def record_payment(self, data: PaymentCreate, user: User) -> Payment:
        if not self.repo.get_client(self.db, data.clientId, user.business_id):
            raise HTTPException(status_code=404, detail="Client not found")

        invoice = None
        if data.invoiceId is not None:
            invoice = self.repo.get_invoice(self.db, data.invoiceId, user.business_id)
            if not invoice:
                raise HTTPException(status_code=404, detail="Invoice not found")
            if invoice.client_id != data.clientId:
                raise HTTPException(
                    status_code=400, detail="Invoice does not belong to the selected client"
                )
            if invoice.status == "cancelled":
                raise HTTPException(
                    status_code=400, detail="Cannot record a payment on a cancelled invoice"
                )
            if invoice.status == "paid":
                raise HTTPException(status_code=400, detail="Invoice is already paid")

        payment = Payment(
            business_id=user.business_id,
            client_id=data.clientId,
            invoice_id=data.invoiceId,
            amount=data.amount,
            payment_method=data.paymentMethod,
            payment_date=data.paymentDate or utcnow(),
            notes=data.notes,
            receipt_key=validate_owned_key(data.receiptKey, user.business_id),
        )
        self.db.add(payment)
        self.db.flush()

        if invoice is not None:
            self.db.refresh(invoice)
            paid = sum((Decimal(p.amount) for p in invoice.payments), Decimal("0"))
            if paid >= Decimal(invoice.amount):
                invoice.status = "paid"
                invoice.paid_date = payment.payment_date
                logger.info(f"💰 Invoice {invoice.invoice_number} fully paid")

        self.db.commit()
        logger.info(
            f"💳 Payment {payment.id} of {payment.amount} ({payment.payment_method}) "
            f"from client {payment.client_id}"
        )
        return self.get_payment(payment.id, user)

    # ========================================================================
    # EXPENSES
    # ========================================================================

    def get_expenses(
        self,
        user: User,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> list[Expense]:
        if start and end and start > end:
            raise HTTPException(status_code=400, detail="start date must be before end date")
        return self.repo.get_expenses(self.db, user.business_id, start, end, category)

    def get_expense(self, expense_id: int, user: User) -> Expense:
        expense = self.repo.get_expense(self.db, expense_id, user.business_id)
        if not expense:
            raise HTTPException(status_code=404, detail="Expense not found")
        return expense

    def create_expense(self, data: ExpenseCreate, user: User) -> Expense:
        expense = Expense(
            business_id=user.business_id,
            category=data.category,
            description=data.description,
            amount=data.amount,
            expense_date=data.expenseDate,
            receipt_key=validate_owned_key(data.receiptKey, user.business_id),
        )
        self.repo.save(self.db, expense)
        logger.info(f"📉 Expense {expense.id} ({expense.category}) recorded: {expense.amount}")
        return expense

    def update_expense(self, expense_id: int, data: ExpenseUpdate, user: User) -> Expense:
        expense = self.get_expense(expense_id, user)
        fields = data.model_dump(exclude_unset=True)
        mapping = {
            "category": "category",
            "description": "description",
            "amount": "amount",
            "expenseDate": "expense_date",
            "receiptKey": "receipt_key",
        }
        if fields.get("receiptKey") is not None:
            validate_owned_key(fields["receiptKey"], user.business_id)
        for field, column in mapping.items():
            if field not in fields:
                continue
            if fields[field] is None and column != "receipt_key":
                continue
            setattr(expense, column, fields[field])
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def delete_expense(self, expense_id: int, user: User) -> dict:
        expense = self.get_expense(expense_id, user)
        receipt_key = expense.receipt_key
        self.repo.delete(self.db, expense)
        if receipt_key:
            get_storage().delete(receipt_key)
        logger.info(f"🗑️ Expense {expense_id} deleted")
        return {"message": "Expense deleted"}
