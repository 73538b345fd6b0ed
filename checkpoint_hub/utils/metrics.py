from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


HTTP_REQUESTS_TOTAL = Counter(
    "checkpoint_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "checkpoint_http_request_duration_seconds",
    "HTTP request duration (seconds)",
    ["method", "path"],
)

# scope: "admin" (unscoped) or "player" (owner-filtered)
CHECKPOINT_OPERATIONS_TOTAL = Counter(
    "checkpoint_operations_total",
    "Checkpoint service operations",
    ["operation", "scope", "result"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
