"""
Monitoring and metrics setup.
"""
import logging
from prometheus_client import Counter, Histogram, generate_latest

logger = logging.getLogger(__name__)

# Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration',
    ['method', 'endpoint']
)

oracle_requests_total = Counter(
    'oracle_requests_total',
    'Oracle value generation attempts',
    ['outcome']
)

fallback_values_total = Counter(
    'fallback_values_total',
    'Values produced by the deterministic fallback generator',
    ['type']
)

value_cache_lookups_total = Counter(
    'value_cache_lookups_total',
    'Value cache lookups',
    ['tier', 'result']
)

test_data_batches_total = Counter(
    'test_data_batches_total',
    'Test case batch assembly attempts',
    ['outcome']
)


def get_metrics():
    """Get Prometheus metrics."""
    return generate_latest()


def record_http_request(method: str, endpoint: str, status: int, duration: float):
    """Record HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
    http_request_duration.labels(method=method, endpoint=endpoint).observe(duration)
