# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Sliding window rate limiter with independent read and write budgets.

The limiter never rejects a call; it only delays it until admitting the call
keeps the number of admissions of its traffic class within the window below
the class limit.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any

from ..types.request import TrafficClass

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 6.0
DEFAULT_READ_LIMIT = 100
DEFAULT_WRITE_LIMIT = 10


@dataclass(frozen=True)
class RateWindowEntry:
    """One admission recorded in the sliding window."""

    timestamp: float
    traffic_class: TrafficClass


@dataclass(frozen=True)
class RateLimiterStats:
    """Admission counters.

    Attributes:
        total_requests: Admissions recorded since creation or last reset
        recent_requests: Admissions inside the current window
        read_requests: READ admissions inside the current window
        write_requests: WRITE admissions inside the current window
    """

    total_requests: int = 0
    recent_requests: int = 0
    read_requests: int = 0
    write_requests: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class SlidingWindowRateLimiter:
    """
    Per-traffic-class sliding window limiter.

    Each ``acquire_slot`` call runs prune, count and record as one critical
    section under an asyncio.Lock. When the class is saturated the lock is
    released before sleeping and the check is repeated after waking, so
    interleaved callers always decide against the latest state and a waiting
    WRITE call never holds up READ calls.

    Example:
        >>> limiter = SlidingWindowRateLimiter()
        >>> await limiter.acquire_slot(TrafficClass.READ)
    """

    def __init__(
        self,
        window: float = DEFAULT_WINDOW_SECONDS,
        read_limit: int = DEFAULT_READ_LIMIT,
        write_limit: int = DEFAULT_WRITE_LIMIT,
    ) -> None:
        """
        Initialize the limiter.

        Args:
            window: Window length in seconds
            read_limit: READ admissions allowed per window
            write_limit: WRITE admissions allowed per window
        """
        if window <= 0:
            raise ValueError("window must be positive")
        if read_limit < 1 or write_limit < 1:
            raise ValueError("limits must be at least 1")

        self.window = window
        self.limits: dict[TrafficClass, int] = {
            TrafficClass.READ: read_limit,
            TrafficClass.WRITE: write_limit,
        }
        # Ordered by timestamp: entries are appended with a monotonic clock
        self._entries: deque[RateWindowEntry] = deque()
        self._total_admissions = 0
        self._lock = asyncio.Lock()

        logger.debug(
            f"SlidingWindowRateLimiter initialized: read={read_limit}, "
            f"write={write_limit} per {window}s"
        )

    def _prune(self, now: float) -> None:
        """Drop entries that have left the window."""
        while self._entries and now - self._entries[0].timestamp >= self.window:
            self._entries.popleft()

    def _oldest_of_class(self, traffic_class: TrafficClass) -> RateWindowEntry | None:
        for entry in self._entries:
            if entry.traffic_class is traffic_class:
                return entry
        return None

    def _count(self, traffic_class: TrafficClass) -> int:
        return sum(1 for e in self._entries if e.traffic_class is traffic_class)

    async def acquire_slot(self, traffic_class: TrafficClass) -> float:
        """
        Wait until a call of ``traffic_class`` may proceed, then record it.

        Args:
            traffic_class: Budget the call is charged against

        Returns:
            Total seconds spent waiting (0.0 when admitted immediately)
        """
        waited = 0.0
        limit = self.limits[traffic_class]

        while True:
            async with self._lock:
                now = time.monotonic()
                self._prune(now)
                if self._count(traffic_class) < limit:
                    self._entries.append(RateWindowEntry(now, traffic_class))
                    self._total_admissions += 1
                    return waited

                oldest = self._oldest_of_class(traffic_class)
                age = now - oldest.timestamp if oldest else self.window
                wait_time = max(0.0, self.window - age)

            logger.warning(
                f"Client-side {traffic_class.value} limit reached "
                f"({limit}/{self.window}s), waiting {wait_time:.2f}s"
            )
            await asyncio.sleep(wait_time)
            waited += wait_time

    def get_stats(self) -> RateLimiterStats:
        """Return admission counters for the current window."""
        now = time.monotonic()
        recent = [e for e in self._entries if now - e.timestamp < self.window]
        return RateLimiterStats(
            total_requests=self._total_admissions,
            recent_requests=len(recent),
            read_requests=sum(
                1 for e in recent if e.traffic_class is TrafficClass.READ
            ),
            write_requests=sum(
                1 for e in recent if e.traffic_class is TrafficClass.WRITE
            ),
        )

    def reset(self) -> None:
        """Forget all recorded admissions."""
        self._entries.clear()
        self._total_admissions = 0
        logger.debug("Rate limiter reset")


__all__ = [
    "DEFAULT_READ_LIMIT",
    "DEFAULT_WINDOW_SECONDS",
    "DEFAULT_WRITE_LIMIT",
    "RateLimiterStats",
    "RateWindowEntry",
    "SlidingWindowRateLimiter",
]
