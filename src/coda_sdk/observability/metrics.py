# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request metrics for the Coda SDK.

This module provides:
1. MetricsCollector - Rolling counters and a bounded response-time history
2. PrometheusRequestMetrics - Optional Prometheus mirror of the same counters

A logical call is recorded once, whatever the number of attempts it took.
Cache hits count toward ``total_requests`` and ``cache_hits`` only: they never
reached the network, so they take no part in success/failure counts or in the
response-time statistics.

Usage:
    metrics = MetricsCollector()

    metrics.record_request(120.5, success=True)
    metrics.record_request(0.2, success=True, from_cache=True)
    metrics.record_rate_limit()

    snapshot = metrics.get_stats()
    print(metrics.export())
"""

from __future__ import annotations

import json
import logging
import math
import threading
import time
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from .constants import (
    OUTCOME_CACHE,
    OUTCOME_FAILURE,
    OUTCOME_SUCCESS,
    RATE_LIMIT_HITS_TOTAL,
    REQUEST_DURATION_SECONDS,
    REQUESTS_TOTAL,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 100
RECENT_RESPONSE_TIMES = 10

# Type declarations for optional prometheus_client imports
if TYPE_CHECKING:
    from prometheus_client import Counter as CounterType, Histogram as HistogramType
else:
    CounterType = object
    HistogramType = object

# Try to import prometheus_client for optional Prometheus metrics
try:
    from prometheus_client import Counter as _Counter, Histogram as _Histogram

    Counter: type[CounterType] | None = _Counter
    Histogram: type[HistogramType] | None = _Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    Histogram = None
    PROMETHEUS_AVAILABLE = False


@dataclass(frozen=True)
class RequestMetricsSnapshot:
    """
    Point-in-time copy of the collector's counters.

    Response times are in milliseconds. ``min_response_time`` is ``inf``
    until the first non-cached call has been recorded.
    ``last_request_time`` is a wall-clock epoch timestamp (0.0 before the
    first call).
    """

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    rate_limit_hits: int = 0
    cache_hits: int = 0
    avg_response_time: float = 0.0
    min_response_time: float = math.inf
    max_response_time: float = 0.0
    last_request_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DetailedMetrics:
    """Snapshot plus derived rates and the most recent response times."""

    snapshot: RequestMetricsSnapshot
    success_rate: float
    error_rate: float
    cache_hit_rate: float
    recent_response_times: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result = self.snapshot.to_dict()
        result.update(
            {
                "success_rate": self.success_rate,
                "error_rate": self.error_rate,
                "cache_hit_rate": self.cache_hit_rate,
                "recent_response_times": list(self.recent_response_times),
            }
        )
        return result


class MetricsCollector:
    """
    Thread-safe in-memory request metrics.

    Min, max and average response times are recomputed from the bounded
    history after every non-cached record, so they describe the last
    ``history_size`` calls rather than the collector's whole lifetime.
    """

    def __init__(
        self,
        history_size: int = DEFAULT_HISTORY_SIZE,
        prometheus: PrometheusRequestMetrics | None = None,
    ) -> None:
        """
        Initialize the collector.

        Args:
            history_size: Number of response times kept for min/max/avg
            prometheus: Optional Prometheus mirror updated on every record
        """
        if history_size < 1:
            raise ValueError("history_size must be at least 1")
        self._history_size = history_size
        self._prometheus = prometheus
        self._lock = threading.Lock()
        self._reset_state()

    def _reset_state(self) -> None:
        self._total_requests = 0
        self._successful_requests = 0
        self._failed_requests = 0
        self._rate_limit_hits = 0
        self._cache_hits = 0
        self._avg_response_time = 0.0
        self._min_response_time = math.inf
        self._max_response_time = 0.0
        self._last_request_time = 0.0
        self._response_times: deque[float] = deque(maxlen=self._history_size)

    def record_request(
        self, duration_ms: float, success: bool, from_cache: bool = False
    ) -> None:
        """
        Record one logical call.

        Args:
            duration_ms: Wall time of the call in milliseconds
            success: Whether the call produced a result
            from_cache: Whether the result was served from the response cache
        """
        with self._lock:
            self._total_requests += 1
            self._last_request_time = time.time()

            if from_cache:
                self._cache_hits += 1
            else:
                if success:
                    self._successful_requests += 1
                else:
                    self._failed_requests += 1

                self._response_times.append(duration_ms)
                self._min_response_time = min(self._response_times)
                self._max_response_time = max(self._response_times)
                self._avg_response_time = sum(self._response_times) / len(
                    self._response_times
                )

        if self._prometheus is not None:
            if from_cache:
                outcome = OUTCOME_CACHE
            else:
                outcome = OUTCOME_SUCCESS if success else OUTCOME_FAILURE
            self._prometheus.observe_request(outcome, duration_ms / 1000.0)

    def record_rate_limit(self) -> None:
        """Record one HTTP 429 response."""
        with self._lock:
            self._rate_limit_hits += 1
        if self._prometheus is not None:
            self._prometheus.observe_rate_limit()

    def get_stats(self) -> RequestMetricsSnapshot:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> RequestMetricsSnapshot:
        # Caller holds self._lock
        return RequestMetricsSnapshot(
            total_requests=self._total_requests,
            successful_requests=self._successful_requests,
            failed_requests=self._failed_requests,
            rate_limit_hits=self._rate_limit_hits,
            cache_hits=self._cache_hits,
            avg_response_time=self._avg_response_time,
            min_response_time=self._min_response_time,
            max_response_time=self._max_response_time,
            last_request_time=self._last_request_time,
        )

    def get_detailed_stats(self) -> DetailedMetrics:
        """
        Return the snapshot with rates derived over ``total_requests``.

        All rates are 0.0 before the first call.
        """
        with self._lock:
            snapshot = self._snapshot()
            recent = list(self._response_times)[-RECENT_RESPONSE_TIMES:]
        total = snapshot.total_requests

        def rate(count: int) -> float:
            return count / total if total > 0 else 0.0

        return DetailedMetrics(
            snapshot=snapshot,
            success_rate=rate(snapshot.successful_requests),
            error_rate=rate(snapshot.failed_requests),
            cache_hit_rate=rate(snapshot.cache_hits),
            recent_response_times=recent,
        )

    def export(self) -> str:
        """Serialize the detailed stats as indented JSON.

        An unset minimum (``inf``) is exported as null.
        """
        data = self.get_detailed_stats().to_dict()
        if math.isinf(data["min_response_time"]):
            data["min_response_time"] = None
        return json.dumps(data, indent=2)

    def reset(self) -> None:
        """Restore every counter to its initial value and clear history."""
        with self._lock:
            self._reset_state()
        logger.debug("Request metrics reset")


class PrometheusRequestMetrics:
    """
    Optional Prometheus metrics for API calls.

    Only instantiated if prometheus_client is available.

    Metrics:
        - coda_sdk_requests_total: Counter of logical calls by outcome
        - coda_sdk_rate_limit_hits_total: Counter of HTTP 429 responses
        - coda_sdk_request_duration_seconds: Histogram of call durations

    Usage:
        >>> if PROMETHEUS_AVAILABLE:
        ...     prom = PrometheusRequestMetrics()
        ...     collector = MetricsCollector(prometheus=prom)
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus request metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.

        Raises:
            ImportError: If prometheus_client is not available.
        """
        if not PROMETHEUS_AVAILABLE or Counter is None or Histogram is None:
            raise ImportError(
                "prometheus_client is not available. "
                "Install with: pip install prometheus-client"
            )

        self.requests_total = Counter(
            REQUESTS_TOTAL,
            "Total logical API calls",
            ["outcome"],  # Values: success, failure, cache
            registry=registry,
        )

        self.rate_limit_hits = Counter(
            RATE_LIMIT_HITS_TOTAL,
            "HTTP 429 responses received",
            registry=registry,
        )

        self.request_duration_seconds = Histogram(
            REQUEST_DURATION_SECONDS,
            "Duration of logical API calls",
            buckets=[0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60],
            registry=registry,
        )

        logger.info("Prometheus request metrics initialized")

    def observe_request(self, outcome: str, duration_seconds: float) -> None:
        """
        Observe one logical call.

        Args:
            outcome: One of success, failure, cache
            duration_seconds: Call duration in seconds
        """
        self.requests_total.labels(outcome=outcome).inc()
        if outcome != OUTCOME_CACHE:
            self.request_duration_seconds.observe(duration_seconds)

    def observe_rate_limit(self) -> None:
        self.rate_limit_hits.inc()


# Module-level singleton: prometheus_client refuses duplicate registrations
_prometheus_request_metrics: PrometheusRequestMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_request_metrics(
    registry: Any | None = None,
) -> PrometheusRequestMetrics | None:
    """
    Get or create the shared Prometheus request metrics.

    Args:
        registry: Optional CollectorRegistry. Only used on first call.

    Returns:
        PrometheusRequestMetrics instance, or None if prometheus_client
        is not available.
    """
    global _prometheus_request_metrics

    if not PROMETHEUS_AVAILABLE:
        return None

    if _prometheus_request_metrics is None:
        with _prometheus_lock:
            if _prometheus_request_metrics is None:
                _prometheus_request_metrics = PrometheusRequestMetrics(registry)

    return _prometheus_request_metrics


def reset_prometheus_request_metrics() -> None:
    """Forget the shared instance. Primarily for tests using custom registries."""
    global _prometheus_request_metrics
    with _prometheus_lock:
        _prometheus_request_metrics = None


__all__ = [
    "DEFAULT_HISTORY_SIZE",
    "PROMETHEUS_AVAILABLE",
    "DetailedMetrics",
    "MetricsCollector",
    "PrometheusRequestMetrics",
    "RequestMetricsSnapshot",
    "get_prometheus_request_metrics",
    "reset_prometheus_request_metrics",
]
