"""Investor executive summary - auto-generated headline findings and next-month priorities"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from lease_analytics.config import settings
from lease_analytics.domain.comparator import find_best_metric
from lease_analytics.domain.models import (
    ExecutiveSummary,
    FunnelStage,
    Insight,
    KPIInvestorReportData,
    RiskScore,
)
from lease_analytics.domain.scoring import compute_risk_score
from lease_analytics.utils.formatters import format_percent

HIGH_CONVERSION_PCT = 30.0
LOW_CONVERSION_PCT = 20.0
PRIORITY_CONVERSION_PCT = 25.0
HEALTHY_MARGIN_PCT = 25.0
LOW_MARGIN_PCT = 15.0
PRIORITY_MARGIN_PCT = 20.0
MAX_REVIEW_DAYS = 3
FLEET_GROWTH_FACTOR = 1.1
BOTTLENECK_SHARE_PCT = 40.0
PRIORITY_LATE_LEASES = 5

DEFAULT_PRIORITIES = ["maintain current performance", "expand the portfolio", "marketing"]


@dataclass(frozen=True)
class SummaryRule:
    """Rule over the investor report; receives the precomputed risk score"""

    name: str
    evaluate: Callable[[KPIInvestorReportData, RiskScore], List[Insight]]


def find_funnel_bottleneck(stages: Sequence[FunnelStage]) -> Optional[FunnelStage]:
    """Stage holding the most leads; the first one wins a tie"""
    if not stages:
        return None
    return max(stages, key=lambda stage: stage.count)


def best_trend(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    best = find_best_metric(data.summary)
    if best is None or not best.change_percentage:
        return []
    return [
        Insight(
            category="operations",
            priority="low",
            message=(
                f"Strongest positive trend: {best.label} grew by "
                f"{format_percent(best.change_percentage)} versus the previous period."
            ),
            metric=best.label,
            value=best.change_percentage,
        )
    ]


def conversion_rate(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    rate = data.funnel.conversion_rate
    if rate > HIGH_CONVERSION_PCT:
        return [
            Insight(
                category="operations",
                priority="low",
                message=f"Conversion rate {format_percent(rate)} is above target. Lead quality is high.",
                metric="conversion_rate",
                value=rate,
            )
        ]
    if rate < LOW_CONVERSION_PCT:
        return [
            Insight(
                category="operations",
                priority="high",
                message=(
                    f"Conversion rate {format_percent(rate)} is low. Improve incoming lead "
                    "quality and speed up processing."
                ),
                metric="conversion_rate",
                value=rate,
            )
        ]
    return []


def risk_level(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    if risk.level == "High":
        return [
            Insight(
                category="operations",
                priority="high",
                message=(
                    f"RISK: {risk.description} Current late leases: {data.risk.late_leases}, "
                    f"debt collection: {data.risk.debt_collection_cases}."
                ),
                metric="risk_score",
                value=risk.score,
            )
        ]
    if risk.level == "Low":
        return [
            Insight(
                category="operations",
                priority="low",
                message=(
                    "Risk metrics are under control. Payment success rate: "
                    f"{format_percent(data.risk.payment_success_rate)}."
                ),
                metric="risk_score",
                value=risk.score,
            )
        ]
    return []


def profit_margin(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    margin = data.financial.stats.profit_margin
    if margin > HEALTHY_MARGIN_PCT:
        return [
            Insight(
                category="profit",
                priority="low",
                message=f"Profit margin {format_percent(margin)} is healthy. The business is profitable.",
                metric="profit_margin",
                value=margin,
            )
        ]
    if margin < LOW_MARGIN_PCT:
        return [
            Insight(
                category="profit",
                priority="high",
                message=(
                    f"Profit margin {format_percent(margin)} is low. Analyze costs and optimize "
                    "the car acquisition structure."
                ),
                metric="profit_margin",
                value=margin,
            )
        ]
    return []


def technician_review_speed(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    days = data.technician.average_days_in_review
    if days > MAX_REVIEW_DAYS:
        return [
            Insight(
                category="operations",
                priority="medium",
                message=(
                    f"Technical review is too slow: {days} days on average. Speed up the "
                    "process or add capacity."
                ),
                metric="average_days_in_review",
                value=days,
            )
        ]
    return [
        Insight(
            category="operations",
            priority="low",
            message=f"Technical review is efficient: {days} days on average.",
            metric="average_days_in_review",
            value=days,
        )
    ]


def fleet_value_growth(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    purchase = data.fleet.total_purchase_value
    estimated = data.fleet.total_estimated_value
    # Zero purchase value would make the growth percentage undefined
    if purchase <= 0 or estimated <= purchase * FLEET_GROWTH_FACTOR:
        return []

    growth = (estimated - purchase) / purchase * 100
    return [
        Insight(
            category="operations",
            priority="low",
            message=f"Fleet value grew by {format_percent(growth)}. Good vehicle selection.",
            metric="fleet_value",
            value=growth,
        )
    ]


def funnel_bottleneck(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    bottleneck = find_funnel_bottleneck(data.funnel.stage_breakdown)
    if bottleneck is None or bottleneck.percentage <= BOTTLENECK_SHARE_PCT:
        return []
    return [
        Insight(
            category="operations",
            priority="medium",
            message=(
                f"Funnel bottleneck: {bottleneck.stage} holds {format_percent(bottleneck.percentage)} "
                "of leads. Add capacity or speed up this step."
            ),
            metric=bottleneck.stage,
            value=bottleneck.percentage,
        )
    ]


def generate_priorities(data: KPIInvestorReportData, level: str) -> List[str]:
    """Up to max_priorities focus areas for next month"""
    priorities: List[str] = []

    if level == "High" or data.risk.late_leases > PRIORITY_LATE_LEASES:
        priorities.append("reduce late leases")
    if data.funnel.conversion_rate < PRIORITY_CONVERSION_PCT:
        priorities.append("raise the conversion rate")
    if data.technician.average_days_in_review > MAX_REVIEW_DAYS:
        priorities.append("speed up technical review")
    if data.financial.stats.profit_margin < PRIORITY_MARGIN_PCT:
        priorities.append("optimize costs")

    if not priorities:
        priorities.extend(DEFAULT_PRIORITIES)

    return priorities[: settings.max_priorities]


def next_month_priorities(data: KPIInvestorReportData, risk: RiskScore) -> List[Insight]:
    priorities = generate_priorities(data, risk.level)
    return [
        Insight(
            category="recommendations",
            priority="high",
            message=f"Priorities for next month: {', '.join(priorities)}.",
        )
    ]


# Rule order is the ranking of the summary; truncation keeps the head
EXECUTIVE_SUMMARY_RULES = (
    SummaryRule("best_trend", best_trend),
    SummaryRule("conversion_rate", conversion_rate),
    SummaryRule("risk_level", risk_level),
    SummaryRule("profit_margin", profit_margin),
    SummaryRule("technician_review_speed", technician_review_speed),
    SummaryRule("fleet_value_growth", fleet_value_growth),
    SummaryRule("funnel_bottleneck", funnel_bottleneck),
    SummaryRule("next_month_priorities", next_month_priorities),
)


def generate_executive_summary(
    data: KPIInvestorReportData, risk: Optional[RiskScore] = None
) -> ExecutiveSummary:
    """
    Build the investor executive summary.

    Rules run in EXECUTIVE_SUMMARY_RULES order and the result is truncated to
    executive_summary_max_items insights.
    """
    risk = risk or compute_risk_score(data.risk)

    insights: List[Insight] = []
    for rule in EXECUTIVE_SUMMARY_RULES:
        insights.extend(rule.evaluate(data, risk))

    return ExecutiveSummary(
        insights=insights[: settings.executive_summary_max_items],
        priorities=generate_priorities(data, risk.level),
    )
