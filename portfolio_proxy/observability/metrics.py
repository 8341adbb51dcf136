from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# counters
proxy_requests_total = Counter(
    "proxy_requests_total",
    "total number of proxied requests",
    ["endpoint", "status"],
)

proxy_errors_total = Counter(
    "proxy_errors_total",
    "total number of proxy errors",
    ["endpoint", "error_type"],
)

# histograms
upstream_duration_seconds = Histogram(
    "proxy_upstream_duration_seconds",
    "duration of calls to external services in seconds",
    ["endpoint"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

image_size_bytes = Histogram(
    "proxy_image_size_bytes",
    "decoded image size in bytes",
    buckets=[1024, 10240, 102400, 1048576, 5242880, 10485760],
)

# gauges
active_requests = Gauge(
    "proxy_active_requests", "number of requests currently in flight", ["endpoint"]
)


def metrics_endpoint() -> Response:
    """prometheus metrics endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_request(endpoint: str, status: str) -> None:
    """record proxied request"""
    proxy_requests_total.labels(endpoint=endpoint, status=status).inc()


def record_error(endpoint: str, error_type: str) -> None:
    """record proxy error"""
    proxy_errors_total.labels(endpoint=endpoint, error_type=error_type).inc()


def record_duration(endpoint: str, duration: float) -> None:
    """record upstream call duration"""
    upstream_duration_seconds.labels(endpoint=endpoint).observe(duration)


def record_image_size(size: int) -> None:
    """record image size"""
    image_size_bytes.observe(size)
