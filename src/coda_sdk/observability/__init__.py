# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for the Coda SDK: request metrics, optional Prometheus
export, health reports and performance watching.
"""

from .constants import (
    METRIC_PREFIX,
    RATE_LIMIT_HITS_TOTAL,
    REQUEST_DURATION_SECONDS,
    REQUESTS_TOTAL,
)
from .health import (
    AlertType,
    HealthReport,
    HealthStatus,
    PerformanceAlert,
    PerformanceWatcher,
    generate_health_report,
)
from .metrics import (
    PROMETHEUS_AVAILABLE,
    DetailedMetrics,
    MetricsCollector,
    PrometheusRequestMetrics,
    RequestMetricsSnapshot,
    get_prometheus_request_metrics,
    reset_prometheus_request_metrics,
)
from .protocols import RequestMetricsProtocol, StatsProviderProtocol

__all__ = [
    "METRIC_PREFIX",
    "PROMETHEUS_AVAILABLE",
    "RATE_LIMIT_HITS_TOTAL",
    "REQUESTS_TOTAL",
    "REQUEST_DURATION_SECONDS",
    "AlertType",
    "DetailedMetrics",
    "HealthReport",
    "HealthStatus",
    "MetricsCollector",
    "PerformanceAlert",
    "PerformanceWatcher",
    "PrometheusRequestMetrics",
    "RequestMetricsProtocol",
    "RequestMetricsSnapshot",
    "StatsProviderProtocol",
    "generate_health_report",
    "get_prometheus_request_metrics",
    "reset_prometheus_request_metrics",
]
