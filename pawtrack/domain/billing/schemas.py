"""Billing domain schemas - invoices, payments and expenses"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models_billing import (
    EXPENSE_CATEGORIES,
    INVOICE_STATUSES,
    PAYMENT_METHODS,
    Expense,
    Invoice,
    InvoiceItem,
    Payment,
)
from ...shared.validators import (
    UTCDateTime,
    format_money,
    validate_choice,
    validate_non_negative,
    validate_positive,
    validate_required_text,
)
from ...utils.storage import get_storage


# ============================================================================
# INVOICES
# ============================================================================


class InvoiceItemCreate(BaseModel):
    description: str
    quantity: int = 1
    unitPrice: Decimal
    appointmentId: Optional[int] = None
    serviceId: Optional[int] = None

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return validate_required_text(v, "Description")

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, v):
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v

    @field_validator("unitPrice")
    @classmethod
    def check_unit_price(cls, v):
        return validate_non_negative(v, "Unit price")


class InvoiceCreate(BaseModel):
    clientId: int
    items: list[InvoiceItemCreate] = []
    amount: Optional[Decimal] = None
    status: str = "draft"
    dueDate: Optional[UTCDateTime] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, INVOICE_STATUSES, "Status")


class InvoiceUpdate(BaseModel):
    status: Optional[str] = None
    dueDate: Optional[UTCDateTime] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, INVOICE_STATUSES, "Status")


class InvoiceItemResponse(BaseModel):
    id: int
    description: str
    quantity: int
    unitPrice: str
    totalPrice: str
    appointmentId: Optional[int] = None
    serviceId: Optional[int] = None

    @classmethod
    def from_item(cls, item: InvoiceItem) -> "InvoiceItemResponse":
        return cls(
            id=item.id,
            description=item.description,
            quantity=item.quantity,
            unitPrice=format_money(item.unit_price),
            totalPrice=format_money(item.total_price),
            appointmentId=item.appointment_id,
            serviceId=item.service_id,
        )


class InvoiceClientSummary(BaseModel):
    id: int
    name: str
    email: str


class InvoiceResponse(BaseModel):
    id: int
    invoiceNumber: str
    clientId: int
    client: Optional[InvoiceClientSummary] = None
    amount: str
    amountPaid: str
    balance: str
    status: str
    dueDate: Optional[datetime] = None
    paidDate: Optional[datetime] = None
    notes: Optional[str] = None
    items: list[InvoiceItemResponse] = []
    createdAt: Optional[datetime] = None

    @classmethod
    def from_invoice(cls, invoice: Invoice, include_items: bool = True) -> "InvoiceResponse":
        paid = sum((p.amount for p in invoice.payments), Decimal("0"))
        return cls(
            id=invoice.id,
            invoiceNumber=invoice.invoice_number,
            clientId=invoice.client_id,
            client=(
                InvoiceClientSummary(
                    id=invoice.client.id, name=invoice.client.full_name, email=invoice.client.email
                )
                if invoice.client
                else None
            ),
            amount=format_money(invoice.amount),
            amountPaid=format_money(paid),
            balance=format_money(max(Decimal(invoice.amount) - paid, Decimal("0"))),
            status=invoice.status,
            dueDate=invoice.due_date,
            paidDate=invoice.paid_date,
            notes=invoice.notes,
            items=[InvoiceItemResponse.from_item(i) for i in invoice.items] if include_items else [],
            createdAt=invoice.created_at,
        )


# ============================================================================
# PAYMENTS
# ============================================================================


class PaymentCreate(BaseModel):
    clientId: int
    invoiceId: Optional[int] = None
    amount: Decimal
    paymentMethod: str
    paymentDate: Optional[UTCDateTime] = None
    notes: Optional[str] = None
    receiptKey: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        return validate_positive(v, "Amount")

    @field_validator("paymentMethod")
    @classmethod
    def check_method(cls, v):
        return validate_choice(v, PAYMENT_METHODS, "Payment method")


class PaymentResponse(BaseModel):
    id: int
    clientId: int
    clientName: Optional[str] = None
    invoiceId: Optional[int] = None
    invoiceNumber: Optional[str] = None
    amount: str
    paymentMethod: str
    paymentDate: Optional[datetime] = None
    notes: Optional[str] = None
    receiptUrl: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_payment(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            clientId=payment.client_id,
            clientName=payment.client.full_name if payment.client else None,
            invoiceId=payment.invoice_id,
            invoiceNumber=payment.invoice.invoice_number if payment.invoice else None,
            amount=format_money(payment.amount),
            paymentMethod=payment.payment_method,
            paymentDate=payment.payment_date,
            notes=payment.notes,
            receiptUrl=get_storage().url(payment.receipt_key),
            createdAt=payment.created_at,
        )


# ============================================================================
# EXPENSES
# ============================================================================


class ExpenseCreate(BaseModel):
    category: str
    description: str
    amount: Decimal
    expenseDate: UTCDateTime
    receiptKey: Optional[str] = None

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return validate_choice(v, EXPENSE_CATEGORIES, "Category")

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return validate_required_text(v, "Description")

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        return validate_positive(v, "Amount")


class ExpenseUpdate(BaseModel):
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    expenseDate: Optional[UTCDateTime] = None
    receiptKey: Optional[str] = None

    @field_validator("category")
    @classmethod
    def check_category(cls, v):
        return validate_choice(v, EXPENSE_CATEGORIES, "Category")

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return None if v is None else validate_required_text(v, "Description")

    @field_validator("amount")
    @classmethod
    def check_amount(cls, v):
        return validate_positive(v, "Amount")


class ExpenseResponse(BaseModel):
    id: int
    category: str
    description: str
    amount: str
    expenseDate: datetime
    receiptKey: Optional[str] = None
    receiptUrl: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseResponse":
        return cls(
            id=expense.id,
            category=expense.category,
            description=expense.description,
            amount=format_money(expense.amount),
            expenseDate=expense.expense_date,
            receiptKey=expense.receipt_key,
            receiptUrl=get_storage().url(expense.receipt_key),
            createdAt=expense.created_at,
        )
