"""
Shared metrics configuration for the Admission Layer.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, Info, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for services."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        # Each collector owns its registry unless one is passed in
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )

        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        self._setup_admission_metrics()

    def _setup_admission_metrics(self):
        """Set up admission-specific metrics."""
        self._metrics["admission_decisions_total"] = Counter(
            "admission_decisions_total",
            "Total admission decisions",
            ["decision"],
            registry=self.registry
        )

        self._metrics["guard_rejections_total"] = Counter(
            "guard_rejections_total",
            "Total rejections by guard",
            ["guard", "reason"],
            registry=self.registry
        )

        self._metrics["rate_limit_hits_total"] = Counter(
            "rate_limit_hits_total",
            "Total rate limit hits",
            ["guard"],
            registry=self.registry
        )

        self._metrics["admission_duration_seconds"] = Histogram(
            "admission_duration_seconds",
            "Guard chain evaluation duration in seconds",
            registry=self.registry
        )

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    def record_admission(self, admitted: bool, duration: float, guard: Optional[str] = None,
                         reason: Optional[str] = None):
        """Record the outcome of one admission call."""
        decision = "admitted" if admitted else "rejected"
        self._metrics["admission_decisions_total"].labels(decision=decision).inc()
        self._metrics["admission_duration_seconds"].observe(duration)
        if not admitted:
            self._metrics["guard_rejections_total"].labels(
                guard=guard or "unknown",
                reason=reason or ""
            ).inc()

    def record_rate_limit_hit(self, guard: str):
        """Record a rate limit rejection."""
        self._metrics["rate_limit_hits_total"].labels(guard=guard).inc()

    def get_sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read a sample from this collector's registry."""
        return self.registry.get_sample_value(name, labels or {})


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
