"""Billing domain - invoices, payments and expenses"""

from .router import router

__all__ = ["router"]
