"""Prometheus metrics for monitoring mutations, settlement volume, and request latency"""

from prometheus_client import Counter, Histogram, Gauge

# Mutation metrics
mutation_counter = Counter(
    "lending_club_mutation_total",
    "System mutations by operation and outcome",
    ["operation", "outcome"],  # outcome: ok | already_exists | doesnt_exist | cannot_update | cannot_delete
)

# Settlement metrics
settlement_transfer_counter = Counter(
    "lending_club_settlement_transfers_total",
    "Daily lendee-to-owner transfers applied",
)

credits_transferred_counter = Counter(
    "lending_club_credits_transferred_total",
    "Credits moved from lendees to owners by settlement",
)

settlement_failure_counter = Counter(
    "lending_club_settlement_failures_total",
    "Per-item settlement steps that failed",
)

current_day_gauge = Gauge(
    "lending_club_current_day",
    "Logical clock of the lending system",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_mutation(operation: str, error: str | None = None) -> None:
    """Count a System mutation by outcome"""
    mutation_counter.labels(operation=operation, outcome=error or "ok").inc()


def record_settlement(current_day: int, transfers: int, credits_moved: float, failures: int) -> None:
    """Record settlement metrics for a closed day"""
    settlement_transfer_counter.inc(transfers)
    credits_transferred_counter.inc(credits_moved)
    settlement_failure_counter.inc(failures)
    current_day_gauge.set(current_day)
