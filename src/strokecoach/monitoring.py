"""Monitoring configuration for the stroke coach."""
from prometheus_client import Counter, Histogram, start_http_server

# Grading metrics
strokes_submitted = Counter(
    "strokecoach_strokes_submitted_total",
    "Total number of strokes submitted, by outcome",
    ["outcome"],
)

penalties_accrued = Counter(
    "strokecoach_penalties_total",
    "Total number of penalty points accrued",
)

forced_reveals = Counter(
    "strokecoach_forced_reveals_total",
    "Total number of strokes revealed after repeated mistakes or on request",
    ["reason"],
)

sessions_completed = Counter(
    "strokecoach_sessions_completed_total",
    "Total number of characters completed, by grade",
    ["grade"],
)

# Lookup metrics
lookup_failures = Counter(
    "strokecoach_lookup_failures_total",
    "Total number of failed character lookups",
)

stale_loads = Counter(
    "strokecoach_stale_loads_total",
    "Total number of lookups discarded because the schedule moved on",
)

lookup_duration = Histogram(
    "strokecoach_lookup_duration_seconds",
    "Duration of character lookups in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
