"""Period-over-period comparison and KPI trend classification"""

from dataclasses import replace
from typing import Any, List, Optional, Sequence

from lease_analytics.domain.models import KPIMetric, MoMChange, Trend
from lease_analytics.utils.formatters import safe_number

FLAT_THRESHOLD_PCT = 1.0


def calc_mom(current: Any, previous: Any) -> MoMChange:
    """
    Month-over-month change between two values.

    pct is None when previous is 0: the change is undefined, not zero.
    The percentage is relative to abs(previous) so a shrinking loss reads as growth.
    """
    curr = safe_number(current)
    prev = safe_number(previous)

    diff = curr - prev
    if prev == 0:
        return MoMChange(diff=diff, pct=None)

    return MoMChange(diff=diff, pct=diff / abs(prev) * 100)


def calc_change_percentage(current: Any, previous: Any) -> Optional[float]:
    """Relative change against the signed baseline; None on a zero baseline"""
    prev = safe_number(previous)
    if prev == 0:
        return None
    return (safe_number(current) - prev) / prev * 100


def calc_trend(change_percentage: Optional[float]) -> Trend:
    if change_percentage is None or abs(change_percentage) < FLAT_THRESHOLD_PCT:
        return "flat"
    return "up" if change_percentage > 0 else "down"


def classify_metrics(metrics: Sequence[KPIMetric]) -> List[KPIMetric]:
    """Fill in a missing trend from each metric's change percentage"""
    if not isinstance(metrics, (list, tuple)):
        return []
    return [
        metric if metric.trend is not None else replace(metric, trend=calc_trend(metric.change_percentage))
        for metric in metrics
    ]


def find_best_metric(metrics: Sequence[KPIMetric]) -> Optional[KPIMetric]:
    """Metric with the largest positive change among those trending up"""
    if not isinstance(metrics, (list, tuple)):
        return None
    rising = [m for m in metrics if m.trend == "up" and m.change_percentage is not None]
    if not rising:
        return None
    return max(rising, key=lambda m: m.change_percentage)


def find_worst_metric(metrics: Sequence[KPIMetric]) -> Optional[KPIMetric]:
    """Metric with the largest negative change among those trending down"""
    if not isinstance(metrics, (list, tuple)):
        return None
    falling = [m for m in metrics if m.trend == "down" and m.change_percentage is not None]
    if not falling:
        return None
    return min(falling, key=lambda m: m.change_percentage)
