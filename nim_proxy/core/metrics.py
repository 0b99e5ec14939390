"""Prometheus metrics for the NIM proxy"""
from prometheus_client import Counter, Histogram, Gauge, Info

# Request metrics
REQUEST_COUNT = Counter(
    'nim_proxy_requests_total',
    'Total number of requests',
    ['method', 'endpoint', 'model', 'status_code']
)

REQUEST_DURATION = Histogram(
    'nim_proxy_request_duration_seconds',
    'Request duration in seconds',
    ['method', 'endpoint', 'model'],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, float('inf'))
)

ACTIVE_REQUESTS = Gauge(
    'nim_proxy_active_requests',
    'Number of active requests',
    ['endpoint']
)

# Streaming metrics
STREAM_EVENTS = Counter(
    'nim_proxy_stream_events_total',
    'Upstream SSE data lines by outcome (emitted, dropped, done)',
    ['outcome']
)

CLIENT_DISCONNECTS = Counter(
    'nim_proxy_client_disconnects_total',
    'Streams stopped because the caller went away'
)

# Upstream health
UPSTREAM_ERRORS = Counter(
    'nim_proxy_upstream_errors_total',
    'Upstream failures by kind',
    ['kind']
)

UPSTREAM_LATENCY = Histogram(
    'nim_proxy_upstream_latency_seconds',
    'Time until upstream response headers arrive',
    ['stream'],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, float('inf'))
)

# Application info
APP_INFO = Info('nim_proxy_app', 'Application information')
