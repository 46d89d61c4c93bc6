"""Payment reconciliation - ledger expectations vs. recorded payments"""

from typing import List, Optional, Sequence

from lease_analytics.config import settings
from lease_analytics.domain.models import (
    MonthlyFinancialRecord,
    PaymentRecord,
    ReconciliationRow,
    ValidationIssue,
)
from lease_analytics.domain.reducers import group_by_month, pick, sum_by
from lease_analytics.utils.formatters import safe_number

# Payment category -> ledger field holding the expected amount.
# Late fees and other revenue are not reconciled.
RECONCILED_CATEGORIES = [
    ("RENT", "rent_payments"),
    ("ADMIN_FEE", "admin_fees"),
    ("INSURANCE", "insurance_fees"),
]


def calculate_reconciliation(
    payments: Sequence[PaymentRecord],
    monthly_data: Sequence[MonthlyFinancialRecord],
) -> List[ReconciliationRow]:
    """
    Compare each month's ledger figures with the payments recorded for that month.

    Produces one row per (month, category), months in ledger order and
    categories in RECONCILED_CATEGORIES order.

    diff_pct is 0 when nothing was expected. This intentionally differs from
    calc_mom, which reports None on a zero baseline.
    """
    rows: List[ReconciliationRow] = []

    if not isinstance(payments, (list, tuple)) or not isinstance(monthly_data, (list, tuple)):
        return rows

    payments_by_month = group_by_month(payments, "month")

    for record in monthly_data:
        month = pick(record, "month")
        month_payments = payments_by_month.get(month, [])

        for category, ledger_field in RECONCILED_CATEGORIES:
            actual = sum_by(
                [p for p in month_payments if pick(p, "category") == category],
                lambda p: pick(p, "amount"),
            )
            expected = safe_number(pick(record, ledger_field))
            diff = actual - expected
            diff_pct = diff / expected * 100 if expected != 0 else 0

            rows.append(
                ReconciliationRow(
                    month=month,
                    category=category,
                    expected=expected,
                    actual=actual,
                    diff=diff,
                    diff_pct=diff_pct,
                )
            )

    return rows


def significant_differences(
    rows: Sequence[ReconciliationRow], threshold: Optional[float] = None
) -> List[ReconciliationRow]:
    """Rows whose relative difference exceeds the threshold (percent, exclusive)"""
    limit = settings.reconciliation_threshold_pct if threshold is None else threshold
    return [row for row in rows if abs(row.diff_pct) > limit]


def reconciliation_warnings(
    rows: Sequence[ReconciliationRow], threshold: Optional[float] = None
) -> List[ValidationIssue]:
    """Significant differences rendered as warning issues"""
    return [
        ValidationIssue(
            severity="warning",
            message=(
                f"{row.month} {row.category}: {abs(row.diff_pct):.1f}% difference "
                f"(Expected: {row.expected:.2f}, Actual: {row.actual:.2f})"
            ),
        )
        for row in significant_differences(rows, threshold)
    ]
