from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "moodlog_requests_total",
    "Total HTTP requests processed by moodlog",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "moodlog_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "moodlog_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

API_COUNTER = Counter(
    "moodlog_api_hits_total",
    "API hits per endpoint",
    ("endpoint",),
)

ENTRY_WRITES = Counter(
    "moodlog_entry_writes_total",
    "Journal entry writes by operation",
    ("operation",),
)

EXPORTS = Counter(
    "moodlog_exports_total",
    "Journal exports by format",
    ("format",),
)

__all__ = [
    "API_COUNTER",
    "ENTRY_WRITES",
    "EXPORTS",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
]
