from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
)

RESERVATIONS_CREATED = Counter(
    "reservations_created_total",
    "Reservations committed together with their history entry",
)

QUEUE_CONFLICTS = Counter(
    "queue_conflicts_total",
    "Queue number assignments aborted because of a concurrent write",
)

HISTORY_STATUS_TRANSITIONS = Counter(
    "history_status_transitions_total",
    "History entry status changes",
    ["status"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
