"""Consistency checks over computed report aggregates.

Checks report problems as ValidationIssue records instead of raising, so a
bad aggregate never blocks the rest of the report.
"""

from typing import Any, List, Optional, Sequence

from lease_analytics.config import settings
from lease_analytics.domain.models import (
    AggregateStats,
    FinancialReportData,
    MonthlyFinancialRecord,
    PercentageCheck,
    ValidationIssue,
)
from lease_analytics.domain.reducers import pick, sum_by
from lease_analytics.utils.formatters import safe_number

# (label, monthly field, stats field)
TOTALS_CHECKS = [
    ("Revenue", "total_revenue", "total_revenue"),
    ("Costs", "total_costs", "total_costs"),
    ("Profit", "net_profit", "total_profit"),
]


def validate_percentages(items: Sequence[Any], tolerance: Optional[float] = None) -> PercentageCheck:
    """
    Check that breakdown percentages sum to 100 within tolerance (percentage points).

    Accepts BreakdownItem records or plain mappings with a "percentage" key.
    """
    limit = settings.percentage_tolerance if tolerance is None else tolerance
    total = sum_by(items, lambda item: pick(item, "percentage"))
    diff = abs(total - 100)
    ok = diff <= limit

    return PercentageCheck(
        ok=ok,
        diff=diff,
        total=total,
        message=None if ok else f"Percentages sum to {total:.2f}%, expected 100% (diff: {diff:.2f})",
    )


def validate_totals(
    monthly_data: Sequence[MonthlyFinancialRecord],
    stats: AggregateStats,
    tolerance: Optional[float] = None,
) -> List[ValidationIssue]:
    """Compare monthly sums with the aggregate totals, one warning per mismatching figure"""
    limit = settings.totals_tolerance if tolerance is None else tolerance
    issues: List[ValidationIssue] = []

    for label, monthly_field, stats_field in TOTALS_CHECKS:
        monthly_sum = sum_by(monthly_data, lambda m: pick(m, monthly_field))
        expected = safe_number(pick(stats, stats_field))
        diff = abs(monthly_sum - expected)

        if diff > limit:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    message=(
                        f"{label} mismatch: monthly sum {monthly_sum:.2f} != stats {expected:.2f} "
                        f"(diff: {diff:.2f})"
                    ),
                )
            )

    return issues


def _breakdown_issue(label: str, items: Any) -> Optional[ValidationIssue]:
    if not isinstance(items, (list, tuple)) or len(items) == 0:
        return None

    check = validate_percentages(items)
    if check.ok:
        return None

    return ValidationIssue(
        severity="warning",
        message=f"{label} breakdown: percentages sum to {check.total:.2f}%, expected 100% (diff: {check.diff:.2f})",
    )


def validate_financial_data(data: Optional[FinancialReportData]) -> List[ValidationIssue]:
    """
    Run every consistency check on a financial report.

    Checks:
    1. Required shape - stats present, monthly data non-empty (error)
    2. Monthly sums vs. stats totals for revenue, costs, profit (warnings)
    3. Revenue and cost breakdown percentages sum to 100 (warnings)

    Every check runs independently: totals are compared whenever stats and a
    month list exist (even an empty one), breakdown checks run regardless.
    """
    if data is None:
        return [ValidationIssue(severity="error", message="No financial report data provided")]

    issues: List[ValidationIssue] = []

    stats = pick(data, "stats")
    monthly_data = pick(data, "monthly_data")
    has_months = isinstance(monthly_data, (list, tuple)) and len(monthly_data) > 0

    missing = []
    if stats is None:
        missing.append("stats")
    if not has_months:
        missing.append("monthly data")

    if missing:
        issues.append(ValidationIssue(severity="error", message=f"Missing required data: {', '.join(missing)}"))

    # An empty month list still sums to 0 and is compared against the stats
    if stats is not None and isinstance(monthly_data, (list, tuple)):
        issues.extend(validate_totals(monthly_data, stats))

    for label, field_name in (("Revenue", "revenue_by_type"), ("Costs", "costs_by_type")):
        issue = _breakdown_issue(label, pick(data, field_name))
        if issue is not None:
            issues.append(issue)

    return issues
