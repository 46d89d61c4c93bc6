"""Domain models - immutable dataclasses representing report inputs and derived results"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Literal, Optional, Union

DateLike = Union[date, datetime, str]

InvoiceStatus = Literal["PAID", "UNPAID", "OVERDUE"]
InsightCategory = Literal["revenue", "costs", "profit", "operations", "recommendations"]
InsightPriority = Literal["high", "medium", "low"]
RiskLevel = Literal["Low", "Medium", "High"]
Severity = Literal["error", "warning"]
Trend = Literal["up", "down", "flat"]


# ---------------------------------------------------------------------------
# Ledger inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonthlyFinancialRecord:
    """One calendar month of the P/L ledger"""

    month: str  # YYYY-MM
    month_label: Optional[str] = None

    # Revenue
    rent_payments: float = 0
    admin_fees: float = 0
    insurance_fees: float = 0
    late_payment_fees: float = 0
    other_revenue: float = 0
    total_revenue: float = 0

    # Costs
    car_purchases: float = 0
    car_purchases_count: int = 0
    insurance_costs: float = 0
    maintenance_costs: float = 0
    operational_costs: float = 0
    other_costs: float = 0
    total_costs: float = 0

    # Profit/loss
    gross_profit: float = 0
    net_profit: float = 0
    profit_margin: float = 0  # percent

    # Lease statistics
    active_leases: int = 0
    new_leases: int = 0
    ended_leases: int = 0
    average_rent_payment: float = 0
    payment_success_rate: float = 0  # percent


@dataclass(frozen=True)
class AggregateStats:
    """Totals and per-month averages across the report date range"""

    total_revenue: float = 0
    total_costs: float = 0
    total_profit: float = 0
    average_monthly_revenue: float = 0
    average_monthly_profit: float = 0
    profit_margin: float = 0
    total_cars_purchased: int = 0
    total_cars_purchased_value: float = 0
    active_leases: int = 0
    total_lease_value: float = 0


@dataclass(frozen=True)
class BreakdownItem:
    """Share of a revenue or cost category in the whole"""

    type: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class InvoiceRecord:
    """Billed invoice; immutable once PAID"""

    invoice_id: str
    amount: float
    due_date: Optional[DateLike]
    status: str  # InvoiceStatus; unknown statuses are kept as-is
    category: str
    month: Optional[str]
    paid_date: Optional[DateLike] = None
    invoice_number: Optional[str] = None
    lease_id: Optional[str] = None
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class PaymentRecord:
    """Money actually received; not linked to a specific invoice"""

    payment_id: str
    amount: float
    payment_date: Optional[DateLike]
    category: str  # RENT | ADMIN_FEE | INSURANCE | ...
    month: Optional[str]
    status: str
    lease_id: Optional[str] = None
    customer_name: Optional[str] = None


@dataclass(frozen=True)
class FinancialReportData:
    """Payload of the CFO P/L report"""

    date_from: Optional[DateLike] = None
    date_to: Optional[DateLike] = None
    stats: Optional[AggregateStats] = None
    monthly_data: List[MonthlyFinancialRecord] = field(default_factory=list)
    invoices: List[InvoiceRecord] = field(default_factory=list)
    payments: List[PaymentRecord] = field(default_factory=list)
    revenue_by_type: List[BreakdownItem] = field(default_factory=list)
    costs_by_type: List[BreakdownItem] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Investor report inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KPIMetric:
    """Headline metric with optional period-over-period change"""

    label: str
    value: float = 0
    unit: Optional[str] = None
    change_percentage: Optional[float] = None
    trend: Optional[Trend] = None


@dataclass(frozen=True)
class KPIFinancialSection:
    stats: AggregateStats
    latest_month: Optional[MonthlyFinancialRecord] = None
    previous_month: Optional[MonthlyFinancialRecord] = None
    revenue_by_type: List[BreakdownItem] = field(default_factory=list)
    costs_by_type: List[BreakdownItem] = field(default_factory=list)


@dataclass(frozen=True)
class FunnelStage:
    stage: str
    count: int
    percentage: float


@dataclass(frozen=True)
class FunnelSection:
    total_leads: int = 0
    converted_leads: int = 0
    declined_leads: int = 0
    conversion_rate: float = 0
    avg_conversion_days: float = 0
    average_requested_amount: float = 0
    stage_breakdown: List[FunnelStage] = field(default_factory=list)


@dataclass(frozen=True)
class TechnicianStats:
    total_handed_to_technician: int = 0
    approved: int = 0
    rejected: int = 0
    in_progress: int = 0
    approval_rate: float = 0
    rejection_rate: float = 0
    average_days_in_review: float = 0


@dataclass(frozen=True)
class FleetStats:
    total_cars: int = 0
    total_purchase_value: float = 0
    total_estimated_value: float = 0
    average_purchase_price: float = 0
    average_estimated_value: float = 0
    average_mileage: float = 0
    average_age: float = 0


@dataclass(frozen=True)
class RiskMetrics:
    """Risk indicators consumed by the risk scorer"""

    late_leases: int = 0
    unpaid_invoices: int = 0
    debt_collection_cases: int = 0
    payment_success_rate: float = 0  # percent


@dataclass(frozen=True)
class KPIInvestorReportData:
    """Payload of the investor KPI report"""

    financial: KPIFinancialSection
    funnel: FunnelSection
    technician: TechnicianStats
    fleet: FleetStats
    risk: RiskMetrics
    summary: List[KPIMetric] = field(default_factory=list)
    highlights: List[KPIMetric] = field(default_factory=list)
    date_from: Optional[DateLike] = None
    date_to: Optional[DateLike] = None


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoMChange:
    """Month-over-month change; pct is None when the baseline is zero"""

    diff: float
    pct: Optional[float]


@dataclass(frozen=True)
class AgingBucket:
    """Unpaid invoices overdue by min_days..max_days (inclusive, None = open-ended)"""

    label: str
    min_days: int
    max_days: Optional[int]
    count: int = 0
    amount: float = 0
    oldest_days: int = 0


@dataclass(frozen=True)
class InvoiceSummary:
    """Collection KPIs over the invoice list"""

    unpaid_count: int
    unpaid_amount: float
    overdue_count: int
    overdue_amount: float
    average_payment_delay_days: float


@dataclass(frozen=True)
class ReconciliationRow:
    """Ledger expectation vs. recorded payments for one (month, category)"""

    month: str
    category: str
    expected: float
    actual: float
    diff: float
    diff_pct: float


@dataclass(frozen=True)
class RiskScore:
    score: float
    level: RiskLevel
    description: str
    components: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Insight:
    category: InsightCategory
    priority: InsightPriority
    message: str
    metric: Optional[str] = None
    value: Optional[float] = None


@dataclass(frozen=True)
class ValidationIssue:
    severity: Severity
    message: str


@dataclass(frozen=True)
class PercentageCheck:
    """Outcome of a breakdown percentage-sum check"""

    ok: bool
    diff: float
    total: float
    message: Optional[str] = None


@dataclass(frozen=True)
class ExecutiveSummary:
    insights: List[Insight]
    priorities: List[str]


@dataclass(frozen=True)
class FinancialAnalysis:
    """Everything the CFO report derives from one FinancialReportData"""

    aging_buckets: List[AgingBucket]
    invoice_summary: InvoiceSummary
    reconciliation: List[ReconciliationRow]
    reconciliation_warnings: List[ValidationIssue]
    validation_issues: List[ValidationIssue]
    insights: List[Insight]


@dataclass(frozen=True)
class InvestorAnalysis:
    """Everything the investor report derives from one KPIInvestorReportData"""

    risk_score: RiskScore
    executive_summary: ExecutiveSummary
    revenue_breakdown_check: PercentageCheck
    costs_breakdown_check: PercentageCheck
    funnel_bottleneck: Optional[FunnelStage]
    month_over_month: Dict[str, MoMChange]
