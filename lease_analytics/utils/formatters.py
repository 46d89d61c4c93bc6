"""Number coercion and display formatting for report values"""

import math
from typing import Any, Optional

from lease_analytics.config import settings

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def safe_number(value: Any) -> float:
    """Coerce a report value to a number; None, NaN and unparseable input become 0"""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return 0 if math.isnan(value) else value
    try:
        num = float(str(value).strip() or 0)
    except (TypeError, ValueError):
        return 0
    return 0 if math.isnan(num) else num


def format_currency(amount: Any, label: Optional[str] = None) -> str:
    """Format amount with space thousand separators, e.g. "-1 234 567 Kc" """
    value = safe_number(amount)
    formatted = f"{abs(value):,.0f}".replace(",", " ")
    sign = "-" if round(value) < 0 else ""
    return f"{sign}{formatted} {label or settings.currency_label}"


def format_percent(value: Any, decimals: int = 1) -> str:
    """Format a value already expressed in percent, e.g. 15.04 -> "15.0%" """
    return f"{safe_number(value):.{decimals}f}%"


def format_month_label(month: Optional[str]) -> str:
    """Turn a YYYY-MM key into "January 2024"; unknown shapes are returned unchanged"""
    if not month:
        return "-"

    parts = month.split("-")
    if len(parts) != 2:
        return month

    year, month_part = parts
    try:
        month_num = int(month_part)
    except ValueError:
        return month

    if not 1 <= month_num <= 12:
        return month

    return f"{MONTH_NAMES[month_num - 1]} {year}"
