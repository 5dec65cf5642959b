"""Report service - dashboard tiles and the income/expense summary"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User
from ...shared.validators import format_money, utcnow
from ..appointments.service import parse_range
from .repository import ReportRepository
from .schemas import DashboardMetrics, ExpenseBreakdown, FinancialSummary, ServiceBreakdown

logger = logging.getLogger(__name__)

ACTIVE_CLIENT_WINDOW = timedelta(days=90)
PENDING_INVOICE_STATUSES = ("sent", "overdue")
ACTIVE_PACKAGE_STATUSES = ("active", "finishing")


class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportRepository()

    def dashboard_metrics(self, user: User, now: Optional[datetime] = None) -> DashboardMetrics:
        now = now or utcnow()
        business_id = user.business_id
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        month_start = today.replace(day=1)
        next_month = (month_start + timedelta(days=32)).replace(day=1)

        return DashboardMetrics(
            appointmentsToday=self.repo.count_appointments(
                self.db, business_id, today, today + timedelta(days=1)
            ),
            monthlyRevenue=format_money(
                self.repo.completed_revenue(
                    self.db, business_id, month_start, next_month, inclusive_end=False
                )
            ),
            activeClients=self.repo.count_active_clients(
                self.db, business_id, now - ACTIVE_CLIENT_WINDOW
            ),
            dogsBoarding=self.repo.count_boarding_dogs(self.db, business_id),
            pendingInvoices=self.repo.count_invoices(
                self.db, business_id, PENDING_INVOICE_STATUSES
            ),
            activePackages=self.repo.count_packages(self.db, business_id, ACTIVE_PACKAGE_STATUSES),
        )

    def financial_summary(
        self, user: User, start: Optional[datetime], end: Optional[datetime]
    ) -> FinancialSummary:
        start, end = parse_range(start, end)
        business_id = user.business_id

        services = [
            ServiceBreakdown(
                serviceId=service_id,
                name=name,
                type=service_type,
                revenue=format_money(Decimal(str(revenue))),
                count=count,
            )
            for service_id, name, service_type, revenue, count in self.repo.service_breakdown(
                self.db, business_id, start, end
            )
        ]
        expense_rows = self.repo.expense_breakdown(self.db, business_id, start, end)
        expenses = [
            ExpenseBreakdown(category=category, total=format_money(Decimal(str(total))), count=count)
            for category, total, count in expense_rows
        ]

        income = self.repo.completed_revenue(self.db, business_id, start, end)
        total_expenses = sum((Decimal(str(row[1])) for row in expense_rows), Decimal("0"))
        logger.info(
            f"📊 Financial summary for business {business_id} {start:%Y-%m-%d}..{end:%Y-%m-%d}: "
            f"income {income}, expenses {total_expenses}"
        )

        return FinancialSummary(
            start=start,
            end=end,
            totalIncome=format_money(income),
            totalExpenses=format_money(total_expenses),
            netProfit=format_money(income - total_expenses),
            serviceBreakdown=services,
            expenseBreakdown=expenses,
        )
