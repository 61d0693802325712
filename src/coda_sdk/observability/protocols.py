# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for metrics sinks and stats providers.

The request engine only needs something it can record into, and the health
tooling only needs something it can read stats from. Both are expressed as
protocols so custom implementations can be supplied.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RequestMetricsProtocol(Protocol):
    """
    Sink for per-call request metrics.

    Example:
        >>> class NullMetrics:
        ...     def record_request(self, duration_ms, success, from_cache=False): pass
        ...     def record_rate_limit(self): pass
        >>>
        >>> isinstance(NullMetrics(), RequestMetricsProtocol)
        True
    """

    def record_request(
        self, duration_ms: float, success: bool, from_cache: bool = False
    ) -> None:
        """
        Record one logical call.

        Args:
            duration_ms: Wall time of the call in milliseconds
            success: Whether the call produced a result
            from_cache: Whether the result came from the response cache
        """
        ...

    def record_rate_limit(self) -> None:
        """Record one HTTP 429 response."""
        ...


@runtime_checkable
class StatsProviderProtocol(Protocol):
    """
    Anything exposing combined client statistics.

    ``get_stats()`` returns a mapping with the keys ``metrics``, ``cache`` and
    ``rate_limiter``; each value is a dict, or None when that subsystem is
    disabled.
    """

    def get_stats(self) -> dict[str, dict[str, Any] | None]: ...


__all__ = ["RequestMetricsProtocol", "StatsProviderProtocol"]
