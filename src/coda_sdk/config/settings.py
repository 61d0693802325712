# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Client Configuration for the Coda SDK

This module provides the configuration dataclass for CodaClient, covering
transport, retry, caching, rate limiting, metrics and log verbosity.
"""

import logging
from dataclasses import dataclass
from enum import Enum

DEFAULT_BASE_URL = "https://coda.io/apis/v1"

PACKAGE_LOGGER = "coda_sdk"


class LogLevel(Enum):
    """Diagnostic verbosity of the SDK's loggers.

    Levels are cumulative: WARN also emits ERROR messages, DEBUG emits
    everything. NONE silences the SDK entirely.
    """

    NONE = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4

    def to_logging_level(self) -> int:
        """Map to the equivalent standard library logging level."""
        return {
            LogLevel.NONE: logging.CRITICAL + 10,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


def configure_logging(level: LogLevel) -> None:
    """Apply a verbosity level to the ``coda_sdk`` package logger.

    Only the level is changed. Handlers and formatting remain the
    application's responsibility.
    """
    logging.getLogger(PACKAGE_LOGGER).setLevel(level.to_logging_level())


@dataclass
class ClientConfig:
    """
    Configuration for CodaClient and its request engine.

    Every governance subsystem (cache, rate limiter, metrics) can be switched
    off independently.
    """

    # === Connection ===

    api_token: str | None = None
    """API token. Falls back to CODA_API_TOKEN / CODA_TOKEN when None."""

    base_url: str = DEFAULT_BASE_URL
    """Base URL of the API, without trailing slash."""

    timeout: float = 30.0
    """Per-attempt transport timeout in seconds."""

    # === Retry ===

    max_retries: int = 3
    """Retries after the first attempt for transient failures."""

    backoff_base: float = 2.0
    """Base of the exponential backoff: attempt n waits backoff_base ** n seconds."""

    max_backoff: float = 60.0
    """Upper bound of a single backoff delay in seconds."""

    # === Caching ===

    enable_cache: bool = True
    """Serve repeated GET calls from the response cache."""

    cache_ttl: float = 300.0
    """Default TTL of cached responses in seconds."""

    # === Rate Limiting ===

    enable_rate_limit: bool = True
    """Throttle outgoing calls with the client-side sliding window limiter."""

    rate_limit_window: float = 6.0
    """Length of the sliding window in seconds."""

    read_limit: int = 100
    """Read calls admitted per window."""

    write_limit: int = 10
    """Write calls admitted per window."""

    # === Metrics and Logging ===

    enable_metrics: bool = True
    """Collect request metrics."""

    enable_prometheus: bool = False
    """Mirror request metrics into prometheus_client (requires the 'full' extra)."""

    log_level: LogLevel = LogLevel.ERROR
    """Verbosity of the coda_sdk loggers."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.backoff_base < 1.0:
            raise ValueError("backoff_base must be at least 1.0")
        if self.max_backoff < 0:
            raise ValueError("max_backoff must be non-negative")
        if self.cache_ttl <= 0:
            raise ValueError("cache_ttl must be positive")
        if self.rate_limit_window <= 0:
            raise ValueError("rate_limit_window must be positive")
        if self.read_limit < 1 or self.write_limit < 1:
            raise ValueError("read_limit and write_limit must be at least 1")
        self.base_url = self.base_url.rstrip("/")


__all__ = [
    "DEFAULT_BASE_URL",
    "PACKAGE_LOGGER",
    "ClientConfig",
    "LogLevel",
    "configure_logging",
]
