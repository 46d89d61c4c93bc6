"""Unit tests for aggregate consistency validation"""

import pytest
from dataclasses import replace

from lease_analytics.domain.models import AggregateStats, BreakdownItem, FinancialReportData
from lease_analytics.domain.validation import validate_financial_data, validate_percentages, validate_totals


def test_validate_percentages_within_tolerance():
    """Test 60 + 39.7 = 99.7 passes with 0.5pp tolerance"""
    check = validate_percentages([{"percentage": 60}, {"percentage": 39.7}])

    assert check.ok is True
    assert check.diff == pytest.approx(0.3)
    assert check.message is None


def test_validate_percentages_outside_tolerance():
    """Test 60 + 30 = 90 fails with a diff of 10"""
    check = validate_percentages([{"percentage": 60}, {"percentage": 30}])

    assert check.ok is False
    assert check.diff == pytest.approx(10.0)
    assert "90.00%" in check.message


def test_validate_percentages_custom_tolerance():
    """Test the tolerance argument overrides the configured default"""
    items = [BreakdownItem("RENT", 1, 99.0)]

    assert validate_percentages(items).ok is False
    assert validate_percentages(items, tolerance=1.0).ok is True


def test_consistent_report_has_no_issues(financial_report):
    """Test the shared fixture is internally consistent"""
    assert validate_financial_data(financial_report) == []


def test_none_data_is_single_error():
    """Test missing data is reported, not raised"""
    issues = validate_financial_data(None)

    assert len(issues) == 1
    assert issues[0].severity == "error"


def test_missing_stats_and_months_is_error_but_breakdowns_still_checked(revenue_by_type):
    """Test the shape error does not stop the percentage checks"""
    bad_breakdown = [BreakdownItem("RENT", 1, 50.0)]
    data = FinancialReportData(stats=None, monthly_data=[], revenue_by_type=revenue_by_type, costs_by_type=bad_breakdown)

    issues = validate_financial_data(data)

    assert [i.severity for i in issues] == ["error", "warning"]
    assert "stats" in issues[0].message and "monthly data" in issues[0].message
    assert issues[1].message.startswith("Costs breakdown")


def test_totals_mismatch_warnings_are_independent(financial_report, stats):
    """Test revenue and profit drift are reported separately, costs stay clean"""
    drifted = replace(stats, total_revenue=stats.total_revenue + 5, total_profit=stats.total_profit + 0.5)
    data = replace(financial_report, stats=drifted)

    issues = validate_financial_data(data)

    assert len(issues) == 1
    assert issues[0].severity == "warning"
    assert issues[0].message.startswith("Revenue mismatch")
    assert "diff: 5.00" in issues[0].message


def test_validate_totals_all_three(monthly_data, stats):
    """Test every figure mismatching yields three warnings"""
    drifted = replace(stats, total_revenue=0, total_costs=0, total_profit=100)

    issues = validate_totals(monthly_data, drifted)

    assert [i.message.split(" ")[0] for i in issues] == ["Revenue", "Costs", "Profit"]


def test_empty_breakdowns_are_skipped(financial_report):
    """Test absent breakdowns are not treated as 0% sums"""
    data = replace(financial_report, revenue_by_type=[], costs_by_type=[])

    assert validate_financial_data(data) == []


def test_both_breakdowns_reported(financial_report):
    """Test revenue and costs breakdown failures are both listed"""
    data = replace(
        financial_report,
        revenue_by_type=[BreakdownItem("RENT", 1, 80.0)],
        costs_by_type=[BreakdownItem("CARS", 1, 120.0)],
    )

    issues = validate_financial_data(data)

    assert [i.message.split(" ")[0] for i in issues] == ["Revenue", "Costs"]
    assert all(i.severity == "warning" for i in issues)


def test_totals_compared_even_without_months():
    """Test stats against an empty month list report both the shape error and the mismatch"""
    data = FinancialReportData(stats=AggregateStats(total_revenue=1000), monthly_data=[])

    issues = validate_financial_data(data)

    assert [i.severity for i in issues] == ["error", "warning"]
    assert issues[0].message == "Missing required data: monthly data"
    assert issues[1].message.startswith("Revenue mismatch: monthly sum 0.00 != stats 1000.00")


def test_totals_skipped_when_months_are_not_a_list():
    """Test a malformed month collection gives only the shape error"""
    data = FinancialReportData(stats=AggregateStats(total_revenue=1000), monthly_data=None)

    issues = validate_financial_data(data)

    assert [i.severity for i in issues] == ["error"]
