"""Prometheus metrics for insight volume, validation health and risk levels"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from lease_analytics.domain.models import Insight, ValidationIssue

# Analysis runs
analysis_counter = Counter(
    "lease_analytics_analysis_total",
    "Report analyses performed",
    ["report"],  # financial | investor
)

analysis_duration_histogram = Histogram(
    "lease_analytics_analysis_duration_seconds",
    "Time spent analyzing one report",
    ["report"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Outputs
insight_counter = Counter(
    "lease_analytics_insights_total",
    "Insights generated",
    ["category", "priority"],
)

validation_issue_counter = Counter(
    "lease_analytics_validation_issues_total",
    "Validation issues reported",
    ["severity"],  # error | warning
)

risk_level_counter = Counter(
    "lease_analytics_risk_level_total",
    "Risk scores computed by level",
    ["level"],  # Low | Medium | High
)


def record_analysis(
    report: str,
    duration_seconds: float,
    insights: Iterable[Insight],
    issues: Iterable[ValidationIssue],
) -> None:
    """Record one analysis run with its insight and issue breakdown"""
    analysis_counter.labels(report=report).inc()
    analysis_duration_histogram.labels(report=report).observe(duration_seconds)

    for insight in insights:
        insight_counter.labels(category=insight.category, priority=insight.priority).inc()

    for issue in issues:
        validation_issue_counter.labels(severity=issue.severity).inc()


def record_risk_level(level: str) -> None:
    risk_level_counter.labels(level=level).inc()
