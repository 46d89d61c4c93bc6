"""Invoice aging analysis - overdue buckets and collection KPIs"""

from datetime import datetime
from typing import Any, List, Optional, Sequence

from lease_analytics.domain.models import AgingBucket, InvoiceRecord, InvoiceSummary
from lease_analytics.domain.reducers import pick, sum_by
from lease_analytics.utils.date_utils import days_between
from lease_analytics.utils.formatters import safe_number

# (label, min_days, max_days) - inclusive, contiguous, last bucket open-ended
AGING_BUCKETS = [
    ("1-7 days", 1, 7),
    ("8-30 days", 8, 30),
    ("31-60 days", 31, 60),
    ("60+ days", 61, None),
]


def _is_paid(invoice: Any) -> bool:
    return str(pick(invoice, "status", "")).upper() == "PAID"


def _bucket_index(days: int) -> Optional[int]:
    for index, (_, min_days, max_days) in enumerate(AGING_BUCKETS):
        if days >= min_days and (max_days is None or days <= max_days):
            return index
    return None


def build_aging_buckets(invoices: Sequence[InvoiceRecord], now: datetime) -> List[AgingBucket]:
    """
    Classify unsettled invoices by how many days they are past due at `now`.

    Rules:
    - PAID invoices never age
    - days = days_between(due_date, now); days <= 0 means not overdue yet
    - Each overdue invoice lands in the first bucket containing `days`

    Always returns every bucket, in order, even when all are empty.
    """
    counts = [0] * len(AGING_BUCKETS)
    amounts = [0.0] * len(AGING_BUCKETS)
    oldest = [0] * len(AGING_BUCKETS)

    if isinstance(invoices, (list, tuple)):
        for invoice in invoices:
            if _is_paid(invoice):
                continue

            days = days_between(pick(invoice, "due_date"), now)
            if days <= 0:
                continue

            index = _bucket_index(days)
            if index is None:
                continue

            counts[index] += 1
            amounts[index] += safe_number(pick(invoice, "amount"))
            oldest[index] = max(oldest[index], days)

    return [
        AgingBucket(
            label=label,
            min_days=min_days,
            max_days=max_days,
            count=counts[index],
            amount=amounts[index],
            oldest_days=oldest[index],
        )
        for index, (label, min_days, max_days) in enumerate(AGING_BUCKETS)
    ]


def format_aging_bucket(days: int) -> str:
    """Bucket label for a days-overdue value"""
    if days <= 0:
        return "Not overdue"
    index = _bucket_index(days)
    return AGING_BUCKETS[index][0]


def summarize_invoices(invoices: Sequence[InvoiceRecord]) -> InvoiceSummary:
    """
    Collection KPIs: unpaid and overdue totals plus average payment delay.

    Delay is averaged over PAID invoices that carry a paid date; paying early
    counts as zero delay, not negative.
    """
    if not isinstance(invoices, (list, tuple)):
        invoices = []

    unpaid = [inv for inv in invoices if str(pick(inv, "status", "")).upper() == "UNPAID"]
    overdue = [inv for inv in invoices if str(pick(inv, "status", "")).upper() == "OVERDUE"]
    paid = [inv for inv in invoices if _is_paid(inv) and pick(inv, "paid_date")]

    delays = [max(0, days_between(pick(inv, "due_date"), pick(inv, "paid_date"))) for inv in paid]
    average_delay = sum(delays) / len(delays) if delays else 0.0

    return InvoiceSummary(
        unpaid_count=len(unpaid),
        unpaid_amount=sum_by(unpaid, lambda inv: pick(inv, "amount")),
        overdue_count=len(overdue),
        overdue_amount=sum_by(overdue, lambda inv: pick(inv, "amount")),
        average_payment_delay_days=average_delay,
    )
