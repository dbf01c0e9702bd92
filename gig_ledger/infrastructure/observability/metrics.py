"""Prometheus metrics for obligation bookkeeping, goal evaluations and HTTP latency"""

from prometheus_client import Counter, Histogram

# Obligation metrics
obligation_mutation_counter = Counter(
    "gig_ledger_obligation_mutations_total",
    "Writes to obligations",
    ["action"],  # create | update | delete | settle | exclude | split
)

# Goal metrics
goal_evaluation_counter = Counter(
    "gig_ledger_goal_evaluations_total",
    "Daily target computations",
    ["state"],  # met | on_track | cycle_ended | forecast | past
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_obligation_mutation(action: str) -> None:
    obligation_mutation_counter.labels(action=action).inc()


def record_goal_evaluation(state: str) -> None:
    """Record which state the goal view ended up in"""
    goal_evaluation_counter.labels(state=state).inc()
