# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Health reporting and performance watching for a client.

``generate_health_report`` grades a client from its current stats.
``PerformanceWatcher`` runs the same stats through alert thresholds on a
background asyncio task and hands each alert to a callback.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .protocols import StatsProviderProtocol

logger = logging.getLogger(__name__)

HEALTHY_MIN_SUCCESS_RATE = 0.98
HEALTHY_MAX_RESPONSE_TIME_MS = 2000.0
DEGRADED_MIN_SUCCESS_RATE = 0.90
DEGRADED_MAX_RESPONSE_TIME_MS = 5000.0

SLOW_RESPONSE_RECOMMENDATION_MS = 3000.0
HIGH_ERROR_RATE = 0.1
LOW_CACHE_HIT_RATE = 0.3


class HealthStatus(str, Enum):
    HEALTHY = "HEALTHY"
    DEGRADED = "DEGRADED"
    UNHEALTHY = "UNHEALTHY"


class AlertType(str, Enum):
    HIGH_RESPONSE_TIME = "HIGH_RESPONSE_TIME"
    LOW_SUCCESS_RATE = "LOW_SUCCESS_RATE"
    RATE_LIMIT_HIT = "RATE_LIMIT_HIT"


@dataclass(frozen=True)
class PerformanceAlert:
    """One threshold breach observed by the watcher."""

    type: AlertType
    message: str
    value: float
    threshold: float


@dataclass(frozen=True)
class HealthReport:
    """
    Graded snapshot of a client's stats.

    Attributes:
        timestamp: Wall-clock epoch time the report was generated
        status: Overall grade
        metrics: Detailed request metrics, empty when metrics are disabled
        cache: Cache stats, empty when caching is disabled
        rate_limiter: Limiter stats, empty when rate limiting is disabled
        recommendations: Human-readable tuning suggestions
    """

    timestamp: float
    status: HealthStatus
    metrics: dict[str, Any] = field(default_factory=dict)
    cache: dict[str, Any] = field(default_factory=dict)
    rate_limiter: dict[str, Any] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)


def _success_rate(metrics: dict[str, Any]) -> float:
    # Cache hits count as served calls
    total = metrics.get("total_requests", 0)
    if total == 0:
        return 1.0
    return (total - metrics.get("failed_requests", 0)) / total


def calculate_health(metrics: dict[str, Any] | None) -> HealthStatus:
    """Grade request metrics. No metrics or no calls yet grades HEALTHY."""
    if not metrics or metrics.get("total_requests", 0) == 0:
        return HealthStatus.HEALTHY

    success_rate = _success_rate(metrics)
    avg_response_time = metrics.get("avg_response_time", 0.0)

    if (
        success_rate >= HEALTHY_MIN_SUCCESS_RATE
        and avg_response_time < HEALTHY_MAX_RESPONSE_TIME_MS
    ):
        return HealthStatus.HEALTHY
    if (
        success_rate >= DEGRADED_MIN_SUCCESS_RATE
        and avg_response_time < DEGRADED_MAX_RESPONSE_TIME_MS
    ):
        return HealthStatus.DEGRADED
    return HealthStatus.UNHEALTHY


def generate_recommendations(stats: dict[str, dict[str, Any] | None]) -> list[str]:
    recommendations: list[str] = []
    metrics = stats.get("metrics")
    cache = stats.get("cache")

    if metrics and metrics.get("total_requests", 0) > 0:
        if metrics.get("avg_response_time", 0.0) > SLOW_RESPONSE_RECOMMENDATION_MS:
            recommendations.append(
                "Consider raising cache_ttl to reduce the number of API calls"
            )
        if metrics.get("rate_limit_hits", 0) > 0:
            recommendations.append(
                "Server rate limits were hit; lower read_limit or write_limit"
            )
        error_rate = metrics.get("failed_requests", 0) / metrics["total_requests"]
        if error_rate > HIGH_ERROR_RATE:
            recommendations.append(
                "High error rate; check connectivity and token permissions"
            )

    if cache and cache.get("hits", 0) + cache.get("misses", 0) > 0:
        if cache.get("hit_rate", 0.0) < LOW_CACHE_HIT_RATE:
            recommendations.append("Low cache hit rate; review the caching strategy")

    return recommendations


def generate_health_report(client: StatsProviderProtocol) -> HealthReport:
    """
    Build a health report from ``client.get_stats()``.

    Args:
        client: A CodaClient, RequestEngine or any other stats provider

    Returns:
        HealthReport graded HEALTHY when the success rate is at least 98%
        and the average response time is under 2000 ms, DEGRADED at 90% and
        5000 ms, UNHEALTHY otherwise.
    """
    stats = client.get_stats()
    return HealthReport(
        timestamp=time.time(),
        status=calculate_health(stats.get("metrics")),
        metrics=dict(stats.get("metrics") or {}),
        cache=dict(stats.get("cache") or {}),
        rate_limiter=dict(stats.get("rate_limiter") or {}),
        recommendations=generate_recommendations(stats),
    )


AlertCallback = Callable[[PerformanceAlert], None]


def _log_alert(alert: PerformanceAlert) -> None:
    logger.warning(f"Performance alert {alert.type.value}: {alert.message}")


class PerformanceWatcher:
    """
    Periodically checks a client's metrics against alert thresholds.

    Usage:
        async with PerformanceWatcher(client, alert_callback=on_alert):
            await do_work(client)

    The callback runs on the event loop; an exception raised by it is logged
    and the watcher keeps running.
    """

    def __init__(
        self,
        client: StatsProviderProtocol,
        max_response_time: float = 5000.0,
        min_success_rate: float = 0.95,
        interval: float = 30.0,
        alert_callback: AlertCallback | None = None,
    ):
        """
        Initialize the watcher.

        Args:
            client: Stats provider to watch
            max_response_time: Average response time (ms) above which to alert
            min_success_rate: Success rate below which to alert
            interval: Seconds between checks
            alert_callback: Receives each alert (defaults to a WARNING log)
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._client = client
        self.max_response_time = max_response_time
        self.min_success_rate = min_success_rate
        self.interval = interval
        self._alert_callback = alert_callback or _log_alert

        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def check_once(self) -> list[PerformanceAlert]:
        """Evaluate the thresholds now and deliver any alerts."""
        metrics = self._client.get_stats().get("metrics")
        alerts: list[PerformanceAlert] = []
        if not metrics:
            return alerts

        avg = metrics.get("avg_response_time", 0.0)
        if avg > self.max_response_time:
            alerts.append(
                PerformanceAlert(
                    type=AlertType.HIGH_RESPONSE_TIME,
                    message=f"High average response time: {avg:.0f}ms",
                    value=avg,
                    threshold=self.max_response_time,
                )
            )

        success_rate = _success_rate(metrics)
        if success_rate < self.min_success_rate:
            alerts.append(
                PerformanceAlert(
                    type=AlertType.LOW_SUCCESS_RATE,
                    message=f"Low success rate: {success_rate * 100:.1f}%",
                    value=success_rate,
                    threshold=self.min_success_rate,
                )
            )

        hits = metrics.get("rate_limit_hits", 0)
        if hits > 0:
            alerts.append(
                PerformanceAlert(
                    type=AlertType.RATE_LIMIT_HIT,
                    message=f"Server rate limit hit {hits} times",
                    value=float(hits),
                    threshold=0.0,
                )
            )

        for alert in alerts:
            try:
                self._alert_callback(alert)
            except Exception as e:
                logger.error(f"Alert callback failed for {alert.type.value}: {e}")

        return alerts

    def start(self) -> None:
        """Start the background watch task."""
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(
                self._watch_loop(), name="coda_performance_watcher"
            )

    async def stop(self) -> None:
        """Stop the background watch task."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None

    async def _watch_loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval)
                self.check_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Performance watcher error: {e}")

    async def __aenter__(self) -> PerformanceWatcher:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()


__all__ = [
    "AlertCallback",
    "AlertType",
    "HealthReport",
    "HealthStatus",
    "PerformanceAlert",
    "PerformanceWatcher",
    "calculate_health",
    "generate_health_report",
    "generate_recommendations",
]
