"""
Utility functions for the application.
"""
from typing import Any, Dict
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from ezsplit.core.config import settings

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Convert a stored amount (Decimal, int, float or str) to Decimal without float drift."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Any) -> Decimal:
    """Round an amount to cents, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_money(value: Any) -> float:
    """Round an amount to 2 decimal places for serialization."""
    return float(quantize_money(value))


def now_local() -> datetime:
    """Current time in the fixed payment timezone offset."""
    tz = timezone(timedelta(hours=settings.PAYMENT_TZ_OFFSET_HOURS))
    return datetime.now(tz)


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
