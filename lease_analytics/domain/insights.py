"""CFO insight generation - ordered threshold rules over the P/L report"""

from dataclasses import dataclass
from typing import Callable, Dict, List

from lease_analytics.domain.comparator import calc_mom
from lease_analytics.domain.models import FinancialReportData, Insight, MonthlyFinancialRecord
from lease_analytics.domain.reducers import avg_by, top_n
from lease_analytics.utils.formatters import format_currency, format_month_label, format_percent

CATEGORY_ORDER = ["revenue", "costs", "profit", "operations", "recommendations"]

# Thresholds
CAR_PURCHASE_LOSS_FACTOR = 1.5  # car purchases vs. revenue in a loss month
LOW_REVENUE_FACTOR = 0.7  # loss-month revenue vs. average monthly revenue
PAYMENT_SUCCESS_DROP_PCT = -5.0
CAR_PURCHASE_GROWTH_FACTOR = 1.3
STRONG_MARGIN_PCT = 20.0
MIN_ACTIVE_LEASES = 50


@dataclass(frozen=True)
class InsightRule:
    """Named predicate-and-formatter; returns zero or more insights"""

    name: str
    evaluate: Callable[[FinancialReportData], List[Insight]]


def _label(record: MonthlyFinancialRecord) -> str:
    return record.month_label or format_month_label(record.month)


def top_revenue_driver(data: FinancialReportData) -> List[Insight]:
    top = top_n(data.revenue_by_type, lambda item: item.amount, 1)
    if not top:
        return []
    item = top[0]
    return [
        Insight(
            category="revenue",
            priority="medium",
            message=f"Main revenue source: {item.type} ({format_currency(item.amount)}, {format_percent(item.percentage)})",
            metric=item.type,
            value=item.amount,
        )
    ]


def top_cost_driver(data: FinancialReportData) -> List[Insight]:
    top = top_n(data.costs_by_type, lambda item: item.amount, 1)
    if not top:
        return []
    item = top[0]
    return [
        Insight(
            category="costs",
            priority="medium",
            message=f"Main cost item: {item.type} ({format_currency(item.amount)}, {format_percent(item.percentage)})",
            metric=item.type,
            value=item.amount,
        )
    ]


def negative_profit_months(data: FinancialReportData) -> List[Insight]:
    """Flag loss months and explain the worst one"""
    losses = [m for m in data.monthly_data if m.net_profit < 0]
    if not losses:
        return []

    # min() keeps the first of equally bad months
    worst = min(losses, key=lambda m: m.net_profit)

    if worst.car_purchases > worst.total_revenue * CAR_PURCHASE_LOSS_FACTOR:
        reason = "high car acquisition costs"
    elif worst.total_revenue < data.stats.average_monthly_revenue * LOW_REVENUE_FACTOR:
        reason = "low revenue"
    else:
        reason = "combination of low revenue and high costs"

    return [
        Insight(
            category="profit",
            priority="high",
            message=(
                f"Negative profit in {len(losses)} months. Worst: {_label(worst)} "
                f"({format_currency(worst.net_profit)}) - reason: {reason}"
            ),
            metric="net_profit",
            value=worst.net_profit,
        )
    ]


def payment_success_decline(data: FinancialReportData) -> List[Insight]:
    """Relative drop in payment success rate between the two latest months"""
    if len(data.monthly_data) < 2:
        return []

    previous, latest = data.monthly_data[-2:]
    change = calc_mom(latest.payment_success_rate, previous.payment_success_rate)
    if change.pct is None or change.pct >= PAYMENT_SUCCESS_DROP_PCT:
        return []

    return [
        Insight(
            category="operations",
            priority="high",
            message=(
                f"Payment success rate fell by {abs(change.pct):.1f}%. "
                "Recommendation: step up payment reminders and consider automated collection"
            ),
            metric="payment_success_rate",
            value=change.pct,
        ),
        Insight(
            category="recommendations",
            priority="high",
            message="Implement automated payment reminders and improve the collection process",
        ),
    ]


def car_purchases_outpacing_revenue(data: FinancialReportData) -> List[Insight]:
    """Average car purchases of the last 3 months against average revenue"""
    if len(data.monthly_data) < 3:
        return []

    recent = list(data.monthly_data[-3:])
    avg_purchases = avg_by(recent, lambda m: m.car_purchases)
    avg_revenue = avg_by(recent, lambda m: m.total_revenue)

    if avg_purchases <= avg_revenue * CAR_PURCHASE_GROWTH_FACTOR:
        return []

    if avg_revenue > 0:
        ratio_text = f"ratio {avg_purchases / avg_revenue:.2f}:1"
    else:
        ratio_text = "no revenue to cover them"

    return [
        Insight(
            category="costs",
            priority="high",
            message=(
                f"Car acquisition costs are growing faster than revenue ({ratio_text}). "
                "Recommendation: review ROI and cash flow"
            ),
            metric="car_purchases",
            value=avg_purchases,
        ),
        Insight(
            category="recommendations",
            priority="high",
            message="Run an ROI analysis of car acquisitions and optimize cash flow",
        ),
    ]


def profit_margin_tier(data: FinancialReportData) -> List[Insight]:
    """Strong margin (>20%) or thin positive margin; losses are covered by negative_profit_months"""
    margin = data.stats.profit_margin

    if margin > STRONG_MARGIN_PCT:
        return [
            Insight(
                category="profit",
                priority="low",
                message=f"Strong profit margin {format_percent(margin)} - excellent result",
                metric="profit_margin",
                value=margin,
            )
        ]

    if margin > 0:
        return [
            Insight(
                category="profit",
                priority="medium",
                message=f"Profit margin {format_percent(margin)} - room for improvement",
                metric="profit_margin",
                value=margin,
            ),
            Insight(
                category="recommendations",
                priority="medium",
                message="Analyze options for cutting costs or raising prices",
            ),
        ]

    return []


def active_lease_health(data: FinancialReportData) -> List[Insight]:
    active = data.stats.active_leases
    if active >= MIN_ACTIVE_LEASES:
        return []

    return [
        Insight(
            category="operations",
            priority="high",
            message=f"Low number of active leases ({active}). Expansion or better conversion needed",
            metric="active_leases",
            value=active,
        ),
        Insight(
            category="recommendations",
            priority="high",
            message="Intensify marketing and improve the lead conversion rate",
        ),
    ]


# Evaluation order is part of the output contract
FINANCIAL_INSIGHT_RULES = (
    InsightRule("top_revenue_driver", top_revenue_driver),
    InsightRule("top_cost_driver", top_cost_driver),
    InsightRule("negative_profit_months", negative_profit_months),
    InsightRule("payment_success_decline", payment_success_decline),
    InsightRule("car_purchases_outpacing_revenue", car_purchases_outpacing_revenue),
    InsightRule("profit_margin_tier", profit_margin_tier),
    InsightRule("active_lease_health", active_lease_health),
)


def generate_insights(data: FinancialReportData) -> List[Insight]:
    """
    Evaluate every financial rule in order and collect their insights.

    Returns an empty list when stats or monthly data are missing.
    """
    if data is None or data.stats is None or not isinstance(data.monthly_data, (list, tuple)):
        return []

    insights: List[Insight] = []
    for rule in FINANCIAL_INSIGHT_RULES:
        insights.extend(rule.evaluate(data))
    return insights


def group_by_category(insights: List[Insight]) -> Dict[str, List[Insight]]:
    """Bucket insights by category in display order, omitting empty categories"""
    groups = {category: [i for i in insights if i.category == category] for category in CATEGORY_ORDER}
    return {category: items for category, items in groups.items() if items}


def top_recommendations(insights: List[Insight], n: int = 3) -> List[Insight]:
    """First n recommendation insights, in generation order"""
    return [i for i in insights if i.category == "recommendations"][:n]
