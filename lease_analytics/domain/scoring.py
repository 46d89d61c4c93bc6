"""Portfolio risk scoring - combines collection indicators into a 0-100 score"""

from typing import Any, Dict, Tuple

from lease_analytics.domain.models import RiskLevel, RiskMetrics, RiskScore
from lease_analytics.domain.reducers import pick
from lease_analytics.utils.formatters import safe_number

MAX_SCORE = 100

LEVEL_DESCRIPTIONS: Dict[str, str] = {
    "Low": "Risk is under control. Continue standard monitoring.",
    "Medium": "Medium risk. Active monitoring and prevention are recommended.",
    "High": "High risk! Immediate action required - contact debtors and start collection.",
}


def calculate_risk_components(risk: Any) -> Dict[str, float]:
    """
    Capped penalty per indicator (higher = riskier).

    Weights:
    - late leases:            5 points each, max 30
    - unpaid invoices:        2 points each, max 25
    - debt collection cases:  5 points each, max 25
    - payment success rate:   1 point per missing percent below 100, max 20
    """
    # Negative counts count as 0
    late_leases = max(0, safe_number(pick(risk, "late_leases")))
    unpaid_invoices = max(0, safe_number(pick(risk, "unpaid_invoices")))
    debt_cases = max(0, safe_number(pick(risk, "debt_collection_cases")))
    success_rate = safe_number(pick(risk, "payment_success_rate"))

    return {
        "late_leases": min(late_leases * 5, 30),
        "unpaid_invoices": min(unpaid_invoices * 2, 25),
        "debt_collection_cases": min(debt_cases * 5, 25),
        "payment_shortfall": min(max(0, 100 - success_rate), 20),
    }


def determine_risk_level(score: float) -> Tuple[RiskLevel, str]:
    """
    Map score to a qualitative level.

    Bands:
    - 0 - <30:  Low
    - 30 - <70: Medium
    - 70+:      High

    Returns: (level, description)
    """
    if score < 30:
        level = "Low"
    elif score < 70:
        level = "Medium"
    else:
        level = "High"
    return level, LEVEL_DESCRIPTIONS[level]


def compute_risk_score(risk: RiskMetrics) -> RiskScore:
    """
    Main entry point: score a RiskMetrics record (or a mapping with the same fields).

    Missing values count as 0, so a missing payment success rate carries the
    full shortfall penalty.
    """
    components = calculate_risk_components(risk)
    score = min(sum(components.values()), MAX_SCORE)
    level, description = determine_risk_level(score)

    return RiskScore(
        score=score,
        level=level,
        description=description,
        components=components,
    )
