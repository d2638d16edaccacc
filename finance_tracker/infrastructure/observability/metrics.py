"""Prometheus metrics for projections, authentication and record changes"""

from prometheus_client import Counter, Histogram

# Projection metrics
projection_counter = Counter(
    "finance_projection_total",
    "Period projections computed",
    ["view"],  # projection | dashboard | calendar | reports
)

skipped_records_counter = Counter(
    "finance_projection_skipped_records_total",
    "Records skipped during projection because of malformed dates",
)

projection_latency_histogram = Histogram(
    "finance_projection_duration_seconds",
    "Time spent loading records and projecting a view",
    ["view"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Auth metrics
auth_counter = Counter(
    "finance_auth_events_total",
    "Authentication attempts",
    ["action", "outcome"],  # register|login|refresh|verify x success|failure
)

# Record metrics
mutation_counter = Counter(
    "finance_record_mutations_total",
    "Created, updated and deleted records",
    ["entity", "action"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_projection(view: str, skipped: int, duration_seconds: float) -> None:
    """Record projection metrics for one view request"""
    projection_counter.labels(view=view).inc()
    projection_latency_histogram.labels(view=view).observe(duration_seconds)
    if skipped:
        skipped_records_counter.inc(skipped)


def record_auth(action: str, success: bool) -> None:
    auth_counter.labels(action=action, outcome="success" if success else "failure").inc()
