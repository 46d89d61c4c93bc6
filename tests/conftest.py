"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from typing import Any, Dict, List

from lease_analytics.domain.models import (
    AggregateStats,
    BreakdownItem,
    FinancialReportData,
    FleetStats,
    FunnelSection,
    FunnelStage,
    InvoiceRecord,
    KPIFinancialSection,
    KPIInvestorReportData,
    KPIMetric,
    MonthlyFinancialRecord,
    PaymentRecord,
    RiskMetrics,
    TechnicianStats,
)


def make_month(month: str, **overrides: Any) -> MonthlyFinancialRecord:
    """Monthly ledger record with revenue/cost totals derived from components"""
    fields: Dict[str, Any] = {
        "rent_payments": 100000,
        "admin_fees": 5000,
        "insurance_fees": 10000,
        "late_payment_fees": 0,
        "other_revenue": 0,
        "car_purchases": 50000,
        "maintenance_costs": 12000,
        "operational_costs": 8000,
        "active_leases": 40,
        "payment_success_rate": 95,
    }
    fields.update(overrides)
    total_revenue = (
        fields["rent_payments"]
        + fields["admin_fees"]
        + fields["insurance_fees"]
        + fields["late_payment_fees"]
        + fields["other_revenue"]
    )
    total_costs = fields["car_purchases"] + fields["maintenance_costs"] + fields["operational_costs"]
    return MonthlyFinancialRecord(
        month=month,
        total_revenue=total_revenue,
        total_costs=total_costs,
        gross_profit=total_revenue - total_costs,
        net_profit=total_revenue - total_costs,
        profit_margin=(total_revenue - total_costs) / total_revenue * 100 if total_revenue else 0,
        **fields,
    )


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for aging calculations"""
    return datetime(2024, 4, 15)


@pytest.fixture
def monthly_data() -> List[MonthlyFinancialRecord]:
    """
    Q1 2024 ledger:
    - January: profitable (116 000 revenue, 70 000 costs)
    - February: heavy car buying, loss of 113 000
    - March: profitable, payment success rate drops from 94% to 85%
    """
    return [
        make_month("2024-01", late_payment_fees=1000),
        make_month(
            "2024-02",
            late_payment_fees=2000,
            car_purchases=200000,
            maintenance_costs=15000,
            operational_costs=15000,
            payment_success_rate=94,
        ),
        make_month(
            "2024-03",
            rent_payments=110000,
            admin_fees=5500,
            insurance_fees=11000,
            car_purchases=40000,
            maintenance_costs=13000,
            operational_costs=7000,
            payment_success_rate=85,
        ),
    ]


@pytest.fixture
def stats(monthly_data: List[MonthlyFinancialRecord]) -> AggregateStats:
    """Aggregate stats consistent with monthly_data"""
    total_revenue = sum(m.total_revenue for m in monthly_data)
    total_costs = sum(m.total_costs for m in monthly_data)
    return AggregateStats(
        total_revenue=total_revenue,
        total_costs=total_costs,
        total_profit=total_revenue - total_costs,
        average_monthly_revenue=total_revenue / len(monthly_data),
        average_monthly_profit=(total_revenue - total_costs) / len(monthly_data),
        profit_margin=(total_revenue - total_costs) / total_revenue * 100,
        total_cars_purchased=12,
        total_cars_purchased_value=290000,
        active_leases=40,
        total_lease_value=1500000,
    )


@pytest.fixture
def invoices() -> List[InvoiceRecord]:
    """Invoice mix relative to `now` (2024-04-15)"""
    return [
        InvoiceRecord("INV-1", 5000, "2024-04-05", "UNPAID", "RENT", "2024-04"),  # 10 days overdue
        InvoiceRecord("INV-2", 3000, "2024-04-12", "OVERDUE", "RENT", "2024-04"),  # 3 days
        InvoiceRecord("INV-3", 7000, "2024-01-06", "PAID", "RENT", "2024-01", paid_date="2024-01-10"),
        InvoiceRecord("INV-4", 2000, "2024-02-01", "OVERDUE", "ADMIN_FEE", "2024-02"),  # 74 days
        InvoiceRecord("INV-5", 9000, "2024-05-01", "UNPAID", "RENT", "2024-05"),  # not due yet
        InvoiceRecord("INV-6", 4000, "2024-03-01", "PAID", "INSURANCE", "2024-03", paid_date="2024-02-28"),
    ]


@pytest.fixture
def payments() -> List[PaymentRecord]:
    """Payments matching the ledger except March rent (99 000 received vs. 110 000 expected)"""
    records = []
    for month, rent, admin, insurance in (
        ("2024-01", 100000, 5000, 10000),
        ("2024-02", 100000, 5000, 10000),
        ("2024-03", 99000, 5500, 11000),
    ):
        records.append(PaymentRecord(f"P-{month}-R", rent, f"{month}-10", "RENT", month, "COMPLETED"))
        records.append(PaymentRecord(f"P-{month}-A", admin, f"{month}-10", "ADMIN_FEE", month, "COMPLETED"))
        records.append(PaymentRecord(f"P-{month}-I", insurance, f"{month}-10", "INSURANCE", month, "COMPLETED"))
    return records


@pytest.fixture
def revenue_by_type() -> List[BreakdownItem]:
    return [
        BreakdownItem("RENT", 310000, 86.23),
        BreakdownItem("ADMIN_FEE", 15500, 4.31),
        BreakdownItem("INSURANCE", 31000, 8.62),
        BreakdownItem("LATE_FEE", 3000, 0.83),
    ]


@pytest.fixture
def costs_by_type() -> List[BreakdownItem]:
    return [
        BreakdownItem("CAR_PURCHASE", 290000, 80.56),
        BreakdownItem("MAINTENANCE", 40000, 11.11),
        BreakdownItem("OPERATIONS", 30000, 8.33),
    ]


@pytest.fixture
def financial_report(
    stats: AggregateStats,
    monthly_data: List[MonthlyFinancialRecord],
    invoices: List[InvoiceRecord],
    payments: List[PaymentRecord],
    revenue_by_type: List[BreakdownItem],
    costs_by_type: List[BreakdownItem],
) -> FinancialReportData:
    return FinancialReportData(
        date_from="2024-01-01",
        date_to="2024-03-31",
        stats=stats,
        monthly_data=monthly_data,
        invoices=invoices,
        payments=payments,
        revenue_by_type=revenue_by_type,
        costs_by_type=costs_by_type,
    )


@pytest.fixture
def investor_report(monthly_data: List[MonthlyFinancialRecord], stats: AggregateStats) -> KPIInvestorReportData:
    """
    Investor report with a medium risk score (36), low conversion,
    slow technical review and a growing fleet value.
    """
    return KPIInvestorReportData(
        date_from="2024-01-01",
        date_to="2024-03-31",
        summary=[
            KPIMetric("Revenue", 126500, change_percentage=8.1, trend="up"),
            KPIMetric("Active leases", 40, change_percentage=-5.0, trend="down"),
            KPIMetric("New leases", 6, change_percentage=12.5, trend="up"),
        ],
        financial=KPIFinancialSection(
            stats=AggregateStats(total_revenue=359500, total_costs=316355, total_profit=43145, profit_margin=12.0),
            latest_month=monthly_data[2],
            previous_month=monthly_data[1],
            revenue_by_type=[BreakdownItem("RENT", 310000, 86.2), BreakdownItem("OTHER", 49500, 13.8)],
            costs_by_type=[BreakdownItem("CAR_PURCHASE", 290000, 60.0), BreakdownItem("OTHER", 26355, 30.0)],
        ),
        funnel=FunnelSection(
            total_leads=100,
            converted_leads=18,
            declined_leads=30,
            conversion_rate=18.0,
            stage_breakdown=[
                FunnelStage("New", 40, 40.0),
                FunnelStage("Technician", 35, 35.0),
                FunnelStage("Finance", 25, 25.0),
            ],
        ),
        technician=TechnicianStats(total_handed_to_technician=50, approved=30, average_days_in_review=4.5),
        fleet=FleetStats(total_cars=20, total_purchase_value=1000000, total_estimated_value=1200000),
        risk=RiskMetrics(late_leases=3, unpaid_invoices=4, debt_collection_cases=1, payment_success_rate=92),
    )
