"""Unit tests for portfolio risk scoring logic"""

import pytest

from lease_analytics.domain.models import RiskMetrics
from lease_analytics.domain.scoring import (
    calculate_risk_components,
    compute_risk_score,
    determine_risk_level,
)


def test_late_leases_penalty_is_capped():
    """Test 10 late leases -> 50 points capped to 30, landing exactly on Medium"""
    risk = compute_risk_score(
        RiskMetrics(late_leases=10, unpaid_invoices=0, debt_collection_cases=0, payment_success_rate=100)
    )

    assert risk.components["late_leases"] == 30
    assert risk.score == 30
    assert risk.level == "Medium"  # < 30 is strict


def test_clean_portfolio_is_low_risk():
    """Test no indicators fire for a healthy portfolio"""
    risk = compute_risk_score(RiskMetrics(payment_success_rate=100))

    assert risk.score == 0
    assert risk.level == "Low"
    assert "under control" in risk.description


def test_all_components_capped_total_100():
    """Test every capped component maxes the score at 100 -> High"""
    risk = compute_risk_score(
        RiskMetrics(late_leases=50, unpaid_invoices=50, debt_collection_cases=50, payment_success_rate=0)
    )

    assert risk.components == {
        "late_leases": 30,
        "unpaid_invoices": 25,
        "debt_collection_cases": 25,
        "payment_shortfall": 20,
    }
    assert risk.score == 100
    assert risk.level == "High"
    assert "Immediate action" in risk.description


def test_mixed_indicators():
    """Test uncapped components add up: 15 + 8 + 5 + 8 = 36"""
    risk = compute_risk_score(
        RiskMetrics(late_leases=3, unpaid_invoices=4, debt_collection_cases=1, payment_success_rate=92)
    )

    assert risk.score == pytest.approx(36)
    assert risk.level == "Medium"


def test_success_rate_above_100_gives_no_negative_penalty():
    """Test shortfall is floored at 0"""
    components = calculate_risk_components(RiskMetrics(payment_success_rate=120))

    assert components["payment_shortfall"] == 0


def test_accepts_mapping_and_missing_values():
    """Test dict input; missing success rate counts as full shortfall"""
    risk = compute_risk_score({"late_leases": 2, "unpaid_invoices": None})

    assert risk.components["late_leases"] == 10
    assert risk.components["unpaid_invoices"] == 0
    assert risk.components["payment_shortfall"] == 20
    assert risk.score == 30


def test_determine_risk_level_bands():
    """Test level mapping to score bands"""
    assert determine_risk_level(0)[0] == "Low"
    assert determine_risk_level(29.9)[0] == "Low"
    assert determine_risk_level(30)[0] == "Medium"
    assert determine_risk_level(69.9)[0] == "Medium"
    assert determine_risk_level(70)[0] == "High"
    assert determine_risk_level(100)[0] == "High"


def test_compute_risk_score_is_idempotent():
    """Test identical input gives identical output"""
    metrics = RiskMetrics(late_leases=7, unpaid_invoices=3, debt_collection_cases=2, payment_success_rate=88)

    assert compute_risk_score(metrics) == compute_risk_score(metrics)


def test_negative_counts_never_lower_the_score():
    """Test negative indicator counts are floored at 0, keeping the score in 0-100"""
    risk = compute_risk_score(
        RiskMetrics(late_leases=-10, unpaid_invoices=-5, debt_collection_cases=-3, payment_success_rate=100)
    )

    assert risk.components["late_leases"] == 0
    assert risk.components["unpaid_invoices"] == 0
    assert risk.components["debt_collection_cases"] == 0
    assert risk.score == 0
    assert risk.level == "Low"
