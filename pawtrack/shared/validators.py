"""Shared validation utilities"""

import re
import unicodedata
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import AfterValidator


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert aware datetimes to naive UTC; naive values are assumed to be UTC already"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# Datetime accepted from the API (ISO 8601, with or without offset) and stored as naive UTC
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_required_text(value: Optional[str], field: str = "Field") -> str:
    """Strip whitespace and reject empty strings"""
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value.strip()


def validate_choice(value: Optional[str], choices: tuple, field: str = "Value") -> Optional[str]:
    if value is None:
        return value
    if value not in choices:
        raise ValueError(f"{field} must be one of: {', '.join(choices)}")
    return value


def validate_non_negative(value, field: str = "Value"):
    if value is not None and value < 0:
        raise ValueError(f"{field} cannot be negative")
    return value


def validate_positive(value, field: str = "Value"):
    if value is not None and value <= 0:
        raise ValueError(f"{field} must be greater than 0")
    return value


def slugify(text: str, fallback: str = "item") -> str:
    """ASCII, lowercase, hyphen separated; accents are folded"""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug[:80] or fallback


def format_money(value: Optional[Decimal]) -> str:
    """Render a Numeric(10, 2) value with exactly two decimals"""
    return f"{Decimal(value or 0):.2f}"
