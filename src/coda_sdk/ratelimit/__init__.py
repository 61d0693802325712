# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Client-side rate limiting."""

from .limiter import (
    DEFAULT_READ_LIMIT,
    DEFAULT_WINDOW_SECONDS,
    DEFAULT_WRITE_LIMIT,
    RateLimiterStats,
    RateWindowEntry,
    SlidingWindowRateLimiter,
)

__all__ = [
    "DEFAULT_READ_LIMIT",
    "DEFAULT_WINDOW_SECONDS",
    "DEFAULT_WRITE_LIMIT",
    "RateLimiterStats",
    "RateWindowEntry",
    "SlidingWindowRateLimiter",
]
