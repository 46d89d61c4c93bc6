"""Report analysis entry points - run the engine over one report payload"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from lease_analytics.domain.aging import build_aging_buckets, summarize_invoices
from lease_analytics.domain.comparator import calc_mom
from lease_analytics.domain.executive_summary import find_funnel_bottleneck, generate_executive_summary
from lease_analytics.domain.insights import generate_insights
from lease_analytics.domain.models import (
    FinancialAnalysis,
    FinancialReportData,
    InvestorAnalysis,
    KPIInvestorReportData,
    MoMChange,
    ValidationIssue,
)
from lease_analytics.domain.reconciliation import calculate_reconciliation, reconciliation_warnings
from lease_analytics.domain.scoring import compute_risk_score
from lease_analytics.domain.validation import validate_financial_data, validate_percentages
from lease_analytics.infrastructure.observability.logging import log_analysis
from lease_analytics.infrastructure.observability.metrics import record_analysis, record_risk_level
from lease_analytics.utils.date_utils import utc_now

MOM_FIELDS = ("total_revenue", "total_costs", "net_profit")


def _count(items: Any) -> int:
    return len(items) if isinstance(items, (list, tuple)) else 0


def analyze_financial_report(data: FinancialReportData, now: Optional[datetime] = None) -> FinancialAnalysis:
    """
    Derive everything the CFO P/L report shows from one payload.

    Flow:
    1. Aging buckets and collection KPIs over invoices (as of `now`)
    2. Reconciliation of ledger vs. payments, plus warnings for large gaps
    3. Consistency validation of the aggregates
    4. Rule-based insights

    `now` defaults to the current UTC time; pass it explicitly for reproducible output.
    """
    start_time = time.time()
    reference_time = now or utc_now()

    aging_buckets = build_aging_buckets(data.invoices, reference_time)
    invoice_summary = summarize_invoices(data.invoices)
    reconciliation = calculate_reconciliation(data.payments, data.monthly_data)
    warnings = reconciliation_warnings(reconciliation)
    issues = validate_financial_data(data)
    insights = generate_insights(data)

    errors = [issue for issue in issues if issue.severity == "error"]
    if errors:
        logging.warning(
            f"Financial report failed validation: {errors[0].message}",
            extra={"report": "financial", "error_count": len(errors)},
        )

    duration = time.time() - start_time
    record_analysis("financial", duration, insights, issues + warnings)
    log_analysis("financial", _count(data.monthly_data), len(insights), len(issues) + len(warnings), duration * 1000)

    return FinancialAnalysis(
        aging_buckets=aging_buckets,
        invoice_summary=invoice_summary,
        reconciliation=reconciliation,
        reconciliation_warnings=warnings,
        validation_issues=issues,
        insights=insights,
    )


def _month_over_month(data: KPIInvestorReportData) -> Dict[str, MoMChange]:
    latest = data.financial.latest_month
    previous = data.financial.previous_month
    if latest is None or previous is None:
        return {}
    return {field: calc_mom(getattr(latest, field), getattr(previous, field)) for field in MOM_FIELDS}


def analyze_investor_report(data: KPIInvestorReportData) -> InvestorAnalysis:
    """
    Derive the investor KPI report: risk score, executive summary,
    breakdown sanity checks, funnel bottleneck and latest-month changes.
    """
    start_time = time.time()

    risk_score = compute_risk_score(data.risk)
    summary = generate_executive_summary(data, risk_score)
    revenue_check = validate_percentages(data.financial.revenue_by_type)
    costs_check = validate_percentages(data.financial.costs_by_type)
    month_over_month = _month_over_month(data)
    issues: List[ValidationIssue] = [
        ValidationIssue(severity="warning", message=f"{label} breakdown: {check.message}")
        for label, check in (("Revenue", revenue_check), ("Costs", costs_check))
        if not check.ok
    ]
    month_count = sum(
        1 for month in (data.financial.latest_month, data.financial.previous_month) if month is not None
    )

    duration = time.time() - start_time
    record_risk_level(risk_score.level)
    record_analysis("investor", duration, summary.insights, issues)
    log_analysis("investor", month_count, len(summary.insights), len(issues), duration * 1000)

    return InvestorAnalysis(
        risk_score=risk_score,
        executive_summary=summary,
        revenue_breakdown_check=revenue_check,
        costs_breakdown_check=costs_check,
        funnel_bottleneck=find_funnel_bottleneck(data.funnel.stage_breakdown),
        month_over_month=month_over_month,
    )
