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

BOOKINGS_CREATED = Counter(
    "shareit_bookings_created_total",
    "Bookings created in WAITING status",
)

BOOKING_DECISIONS = Counter(
    "shareit_booking_decisions_total",
    "Owner decisions on waiting bookings",
    ["status"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
