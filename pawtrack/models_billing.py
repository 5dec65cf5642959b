"""
Invoice, payment, expense and prepaid package models
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue", "cancelled")
PAYMENT_METHODS = ("transfer", "cash", "card", "other")
EXPENSE_CATEGORIES = (
    "supplies",
    "utilities",
    "salaries",
    "rent",
    "marketing",
    "maintenance",
    "other",
)
PACKAGE_STATUSES = ("active", "finishing", "completed", "expired")


class Invoice(Base):
    """Invoice model for client billing"""

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("business_id", "invoice_number", name="uq_invoice_business_number"),
    )

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default="draft", nullable=False)
    due_date = Column(DateTime, nullable=True)
    paid_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="invoices")
    items = relationship(
        "InvoiceItem", back_populates="invoice", cascade="all, delete", order_by="InvoiceItem.id"
    )
    payments = relationship("Payment", back_populates="invoice")


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    description = Column(Text, nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="items")
    service = relationship("Service")


class Payment(Base):
    """Money received from a client, optionally settling an invoice"""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=False)  # transfer, cash, card, other
    payment_date = Column(DateTime, server_default=func.now())
    notes = Column(Text, nullable=True)
    receipt_key = Column(String(500), nullable=True)  # Object storage key of the receipt image
    created_at = Column(DateTime, server_default=func.now())

    client = relationship("Client", back_populates="payments")
    invoice = relationship("Invoice", back_populates="payments")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    category = Column(String(20), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    expense_date = Column(DateTime, nullable=False, index=True)
    receipt_key = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Package(Base):
    """Prepaid bundle of training sessions"""

    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    dog_id = Column(Integer, ForeignKey("dogs.id", ondelete="SET NULL"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=True)
    package_name = Column(String(255), nullable=False)
    total_sessions = Column(Integer, nullable=False)
    used_sessions = Column(Integer, default=0, nullable=False)
    remaining_sessions = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    purchase_date = Column(DateTime, server_default=func.now())
    expiry_date = Column(DateTime, nullable=True)
    status = Column(String(20), default="active", nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="packages")
    dog = relationship("Dog")
    service = relationship("Service")
    sessions = relationship(
        "PackageSession",
        back_populates="package",
        cascade="all, delete",
        order_by="PackageSession.session_date.desc()",
    )


class PackageSession(Base):
    """One attended session consumed from a package"""

    __tablename__ = "package_sessions"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    dog_id = Column(Integer, ForeignKey("dogs.id", ondelete="SET NULL"), nullable=True)
    session_date = Column(DateTime, nullable=False)
    session_type = Column(String(100), nullable=True)
    status = Column(String(20), default="attended", nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    package = relationship("Package", back_populates="sessions")
