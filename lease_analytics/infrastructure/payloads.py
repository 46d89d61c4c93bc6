"""Pydantic schemas for reporting-API payloads and their mapping onto domain records.

The reporting backend sends camelCase JSON. Numeric fields are coerced
leniently (null/NaN/garbage -> 0); structural problems raise
InvalidReportDataError.
"""

import math
from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from lease_analytics.domain.exceptions import InvalidReportDataError
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
from lease_analytics.utils.formatters import safe_number


def _safe_int(value: Any) -> int:
    try:
        return int(safe_number(value))
    except (OverflowError, ValueError):
        return 0


def _optional_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(num) else num


def _trend(value: Any) -> Optional[str]:
    return value if value in ("up", "down", "flat") else None


SafeFloat = Annotated[float, BeforeValidator(safe_number)]
SafeInt = Annotated[int, BeforeValidator(_safe_int)]
OptionalFloat = Annotated[Optional[float], BeforeValidator(_optional_number)]
DateValue = Optional[Union[datetime, date, str]]


class CamelModel(BaseModel):
    """Accepts camelCase keys from the API and snake_case keys from Python callers"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class MonthlyRecordSchema(CamelModel):
    month: str = Field(..., min_length=1)
    month_label: Optional[str] = None

    rent_payments: SafeFloat = 0
    admin_fees: SafeFloat = 0
    insurance_fees: SafeFloat = 0
    late_payment_fees: SafeFloat = 0
    other_revenue: SafeFloat = 0
    total_revenue: SafeFloat = 0

    car_purchases: SafeFloat = 0
    car_purchases_count: SafeInt = 0
    insurance_costs: SafeFloat = 0
    maintenance_costs: SafeFloat = 0
    operational_costs: SafeFloat = 0
    other_costs: SafeFloat = 0
    total_costs: SafeFloat = 0

    gross_profit: SafeFloat = 0
    net_profit: SafeFloat = 0
    profit_margin: SafeFloat = 0

    active_leases: SafeInt = 0
    new_leases: SafeInt = 0
    ended_leases: SafeInt = 0
    average_rent_payment: SafeFloat = 0
    payment_success_rate: SafeFloat = 0


class StatsSchema(CamelModel):
    total_revenue: SafeFloat = 0
    total_costs: SafeFloat = 0
    total_profit: SafeFloat = 0
    average_monthly_revenue: SafeFloat = 0
    average_monthly_profit: SafeFloat = 0
    profit_margin: SafeFloat = 0
    total_cars_purchased: SafeInt = 0
    total_cars_purchased_value: SafeFloat = 0
    active_leases: SafeInt = 0
    total_lease_value: SafeFloat = 0


class BreakdownSchema(CamelModel):
    type: str
    amount: SafeFloat = 0
    percentage: SafeFloat = 0


class InvoiceSchema(CamelModel):
    invoice_id: str = ""
    amount: SafeFloat = 0
    due_date: DateValue = None
    paid_date: DateValue = None
    status: str = ""
    category: str = Field("", alias="type")
    month: Optional[str] = None
    invoice_number: Optional[str] = None
    lease_id: Optional[str] = None
    customer_name: Optional[str] = None


class PaymentSchema(CamelModel):
    payment_id: str = ""
    amount: SafeFloat = 0
    payment_date: DateValue = None
    category: str = Field("", alias="type")
    month: Optional[str] = None
    status: str = ""
    lease_id: Optional[str] = None
    customer_name: Optional[str] = None


class FinancialReportSchema(CamelModel):
    """Payload of GET /reporting/financial"""

    date_from: DateValue = None
    date_to: DateValue = None
    stats: Optional[StatsSchema] = None
    monthly_data: List[MonthlyRecordSchema] = []
    invoices: List[InvoiceSchema] = []
    payments: List[PaymentSchema] = []
    revenue_by_type: List[BreakdownSchema] = []
    costs_by_type: List[BreakdownSchema] = []


class KPIMetricSchema(CamelModel):
    label: str
    value: SafeFloat = 0
    unit: Optional[str] = None
    change_percentage: OptionalFloat = None
    trend: Annotated[Optional[str], BeforeValidator(_trend)] = None


class KPIFinancialSchema(CamelModel):
    stats: StatsSchema = StatsSchema()
    latest_month: Optional[MonthlyRecordSchema] = None
    previous_month: Optional[MonthlyRecordSchema] = None
    revenue_by_type: List[BreakdownSchema] = []
    costs_by_type: List[BreakdownSchema] = []


class FunnelStageSchema(CamelModel):
    stage: str
    count: SafeInt = 0
    percentage: SafeFloat = 0


class FunnelSchema(CamelModel):
    total_leads: SafeInt = 0
    converted_leads: SafeInt = 0
    declined_leads: SafeInt = 0
    conversion_rate: SafeFloat = 0
    avg_conversion_days: SafeFloat = 0
    average_requested_amount: SafeFloat = 0
    stage_breakdown: List[FunnelStageSchema] = []


class TechnicianStatsSchema(CamelModel):
    total_handed_to_technician: SafeInt = 0
    approved: SafeInt = 0
    rejected: SafeInt = 0
    in_progress: SafeInt = 0
    approval_rate: SafeFloat = 0
    rejection_rate: SafeFloat = 0
    average_days_in_review: SafeFloat = 0


class TechnicianSchema(CamelModel):
    stats: TechnicianStatsSchema = TechnicianStatsSchema()


class FleetStatsSchema(CamelModel):
    total_cars: SafeInt = 0
    total_purchase_value: SafeFloat = 0
    total_estimated_value: SafeFloat = 0
    average_purchase_price: SafeFloat = 0
    average_estimated_value: SafeFloat = 0
    average_mileage: SafeFloat = 0
    average_age: SafeFloat = 0


class FleetSchema(CamelModel):
    stats: FleetStatsSchema = FleetStatsSchema()


class RiskSchema(CamelModel):
    late_leases: SafeInt = 0
    unpaid_invoices: SafeInt = 0
    debt_collection_cases: SafeInt = 0
    payment_success_rate: SafeFloat = 0


class InvestorReportSchema(CamelModel):
    """Payload of GET /reporting/kpi-investor"""

    date_from: DateValue = None
    date_to: DateValue = None
    summary: List[KPIMetricSchema] = []
    highlights: List[KPIMetricSchema] = []
    financial: KPIFinancialSchema = KPIFinancialSchema()
    funnel: FunnelSchema = FunnelSchema()
    technician: TechnicianSchema = TechnicianSchema()
    fleet: FleetSchema = FleetSchema()
    risk: RiskSchema = RiskSchema()


def _month(schema: Optional[MonthlyRecordSchema]) -> Optional[MonthlyFinancialRecord]:
    return MonthlyFinancialRecord(**schema.model_dump()) if schema is not None else None


def _breakdown(items: List[BreakdownSchema]) -> List[BreakdownItem]:
    return [BreakdownItem(**item.model_dump()) for item in items]


def _validate(schema: type, payload: Dict[str, Any]) -> Any:
    if not isinstance(payload, dict):
        raise InvalidReportDataError(f"Report payload must be an object, got {type(payload).__name__}")
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise InvalidReportDataError(f"Invalid report data: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e


def parse_financial_report(payload: Dict[str, Any]) -> FinancialReportData:
    """
    Map a financial report payload onto domain records.

    Raises:
        InvalidReportDataError: On wrong container types or missing month keys
    """
    report = _validate(FinancialReportSchema, payload)

    return FinancialReportData(
        date_from=report.date_from,
        date_to=report.date_to,
        stats=AggregateStats(**report.stats.model_dump()) if report.stats is not None else None,
        monthly_data=[_month(m) for m in report.monthly_data],
        invoices=[InvoiceRecord(**inv.model_dump()) for inv in report.invoices],
        payments=[PaymentRecord(**pmt.model_dump()) for pmt in report.payments],
        revenue_by_type=_breakdown(report.revenue_by_type),
        costs_by_type=_breakdown(report.costs_by_type),
    )


def parse_investor_report(payload: Dict[str, Any]) -> KPIInvestorReportData:
    """
    Map an investor KPI report payload onto domain records.

    Raises:
        InvalidReportDataError: On wrong container types or missing labels
    """
    report = _validate(InvestorReportSchema, payload)

    return KPIInvestorReportData(
        date_from=report.date_from,
        date_to=report.date_to,
        summary=[KPIMetric(**m.model_dump()) for m in report.summary],
        highlights=[KPIMetric(**m.model_dump()) for m in report.highlights],
        financial=KPIFinancialSection(
            stats=AggregateStats(**report.financial.stats.model_dump()),
            latest_month=_month(report.financial.latest_month),
            previous_month=_month(report.financial.previous_month),
            revenue_by_type=_breakdown(report.financial.revenue_by_type),
            costs_by_type=_breakdown(report.financial.costs_by_type),
        ),
        funnel=FunnelSection(
            **report.funnel.model_dump(exclude={"stage_breakdown"}),
            stage_breakdown=[FunnelStage(**s.model_dump()) for s in report.funnel.stage_breakdown],
        ),
        technician=TechnicianStats(**report.technician.stats.model_dump()),
        fleet=FleetStats(**report.fleet.stats.model_dump()),
        risk=RiskMetrics(**report.risk.model_dump()),
    )
