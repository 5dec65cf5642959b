from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ...shared.validators import to_naive_utc
from .schemas import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    InvoiceCreate,
    InvoiceResponse,
    InvoiceUpdate,
    PaymentCreate,
    PaymentResponse,
)
from .service import BillingService

router = APIRouter(tags=["Billing"])


def get_billing_service(db: Session = Depends(get_db)) -> BillingService:
    return BillingService(db)


# ============================================================================
# INVOICES
# ============================================================================


@router.get("/invoices", response_model=list[InvoiceResponse])
async def get_invoices(
    status: Optional[str] = Query(None),
    client_id: Optional[int] = Query(None, alias="clientId"),
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return [
        InvoiceResponse.from_invoice(i, include_items=False)
        for i in service.get_invoices(current_user, status, client_id)
    ]


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return InvoiceResponse.from_invoice(service.get_invoice(invoice_id, current_user))


@router.post("/invoices", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return InvoiceResponse.from_invoice(service.create_invoice(data, current_user))


@router.patch("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return InvoiceResponse.from_invoice(service.update_invoice(invoice_id, data, current_user))


@router.delete("/invoices/{invoice_id}")
async def delete_invoice(
    invoice_id: int,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return service.delete_invoice(invoice_id, current_user)


# ============================================================================
# PAYMENTS
# ============================================================================


@router.get("/payments", response_model=list[PaymentResponse])
async def get_payments(
    client_id: Optional[int] = Query(None, alias="clientId"),
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return [PaymentResponse.from_payment(p) for p in service.get_payments(current_user, client_id)]


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return PaymentResponse.from_payment(service.get_payment(payment_id, current_user))


@router.post("/payments", response_model=PaymentResponse, status_code=201)
async def record_payment(
    data: PaymentCreate,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return PaymentResponse.from_payment(service.record_payment(data, current_user))


# ============================================================================
# EXPENSES
# ============================================================================


@router.get("/expenses", response_model=list[ExpenseResponse])
async def get_expenses(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    category: Optional[str] = Query(None),
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    expenses = service.get_expenses(
        current_user, to_naive_utc(start), to_naive_utc(end), category
    )
    return [ExpenseResponse.from_expense(e) for e in expenses]


@router.get("/expenses/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return ExpenseResponse.from_expense(service.get_expense(expense_id, current_user))


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    data: ExpenseCreate,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return ExpenseResponse.from_expense(service.create_expense(data, current_user))


@router.patch("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return ExpenseResponse.from_expense(service.update_expense(expense_id, data, current_user))


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: int,
    current_user: User = Depends(require_admin),
    service: BillingService = Depends(get_billing_service),
):
    return service.delete_expense(expense_id, current_user)
