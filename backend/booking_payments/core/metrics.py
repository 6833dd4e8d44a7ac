"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

import time
from contextlib import contextmanager

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Booking metrics
payment_requests = Counter(
    'payment_requests_total',
    'Processed booking submissions',
    ['result']  # charged, invoiced, rejected, failed
)

row_appends = Counter(
    'row_appends_total',
    'Rows appended to the bookings sheet',
    ['result']  # ok, error
)

notifications = Counter(
    'notifications_total',
    'Booking notification emails',
    ['result']  # sent, error
)

# External services
external_call_latency = Histogram(
    'external_call_latency_seconds',
    'Latency of calls to external services',
    ['service'],  # catalog, sheets, stripe, smtp
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@contextmanager
def track_external_call(service: str):
    """Time a call to an external service, whether or not it succeeds."""
    start = time.perf_counter()
    try:
        yield
    finally:
        external_call_latency.labels(service=service).observe(time.perf_counter() - start)


def record_payment_request(result: str):
    """Record outcome of a /processPayment call."""
    payment_requests.labels(result=result).inc()

def record_row_append(ok: bool):
    row_appends.labels(result="ok" if ok else "error").inc()

def record_notification(sent: bool):
    notifications.labels(result="sent" if sent else "error").inc()
