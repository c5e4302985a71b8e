import logging

from prometheus_client import Counter, Histogram, Info, generate_latest
from prometheus_client.core import CollectorRegistry

from car_api import __version__

logger = logging.getLogger(__name__)

# Prometheus Registry
REGISTRY = CollectorRegistry()

service_requests_total = Counter(
    'car_api_requests_total',
    'Total service calls',
    ['status', 'service', 'method'],
    registry=REGISTRY
)

service_duration_seconds = Histogram(
    'car_api_request_duration_seconds',
    'Service call duration in seconds',
    ['service', 'method'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
    registry=REGISTRY
)

validation_failures_total = Counter(
    'car_api_validation_failures_total',
    'Rejected car submissions by reason',
    ['reason'],
    registry=REGISTRY
)

system_info = Info(
    'car_api_info',
    'System information',
    registry=REGISTRY
)


class PrometheusMetricsCollector:
    """Records service and validation metrics into the process registry"""

    def __init__(self):
        system_info.info({
            'version': __version__,
            'service': 'car-api'
        })

    def record_service_call(
        self,
        service_name: str,
        method_name: str,
        duration_seconds: float,
        success: bool,
    ):
        status = 'success' if success else 'error'

        service_requests_total.labels(
            status=status,
            service=service_name,
            method=method_name
        ).inc()

        service_duration_seconds.labels(
            service=service_name,
            method=method_name
        ).observe(duration_seconds)

    def record_validation_failure(self, reason: str):
        validation_failures_total.labels(reason=reason).inc()

    def get_prometheus_metrics(self) -> bytes:
        """Get Prometheus metrics in text format"""
        return generate_latest(REGISTRY)


# Global instance
prometheus_collector = PrometheusMetricsCollector()
