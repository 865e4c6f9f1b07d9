"""Prometheus metrics for monitoring calculations, validation failures and risk distribution"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "loan_engine_calculations_total",
    "Total schedule computations served",
    ["cache"],  # hit | miss
)

validation_failure_counter = Counter(
    "loan_engine_validation_failures_total",
    "Requests rejected by input validation",
    ["field"],
)

schedule_length_histogram = Histogram(
    "loan_engine_schedule_length_months",
    "Number of payments in computed schedules",
    buckets=[6, 12, 24, 36, 60, 120, 240, 360, 480],
)

# Risk metrics
risk_level_counter = Counter(
    "loan_engine_risk_level_total",
    "Risk assessments by resulting level",
    ["level"],  # LOW | MEDIUM | HIGH | VERY_HIGH
)

auto_approval_counter = Counter(
    "loan_engine_auto_approval_eligible_total",
    "Risk assessments by auto-approval eligibility",
    ["eligible"],  # true | false
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(cache_hit: bool, term_months: int) -> None:
    """Record schedule computation metrics"""
    calculation_counter.labels(cache="hit" if cache_hit else "miss").inc()
    schedule_length_histogram.observe(term_months)


def record_assessment(risk_level: str, eligible_for_auto_approval: bool) -> None:
    """Record risk distribution for monitoring approval funnel"""
    risk_level_counter.labels(level=risk_level).inc()
    auto_approval_counter.labels(eligible="true" if eligible_for_auto_approval else "false").inc()


def record_validation_failure(field: str) -> None:
    validation_failure_counter.labels(field=field).inc()
