from datetime import datetime

from pydantic import BaseModel


class DashboardMetrics(BaseModel):
    appointmentsToday: int
    monthlyRevenue: str
    activeClients: int
    dogsBoarding: int
    pendingInvoices: int
    activePackages: int


class ServiceBreakdown(BaseModel):
    serviceId: int
    name: str
    type: str
    revenue: str
    count: int


class ExpenseBreakdown(BaseModel):
    category: str
    total: str
    count: int


class FinancialSummary(BaseModel):
    start: datetime
    end: datetime
    totalIncome: str
    totalExpenses: str
    netProfit: str
    serviceBreakdown: list[ServiceBreakdown]
    expenseBreakdown: list[ExpenseBreakdown]
