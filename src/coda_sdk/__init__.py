# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Coda SDK - Async client for the Coda REST API.

Every call goes through a request engine that applies client-side rate
limiting, response caching, retries with exponential backoff and request
metrics.

Key Features:
    - Independent read and write rate limit budgets (sliding window)
    - TTL response cache for reads, evicted by writes to the same table
    - Typed error taxonomy with retry classification
    - Mutation polling, pagination, batch insert, search and upsert helpers
    - Optional Prometheus metrics and health reporting

Quick Start:
    >>> from coda_sdk import CodaClient, ClientConfig
    >>> from coda_sdk.helpers import get_all_rows
    >>>
    >>> async with CodaClient(ClientConfig(api_token="...")) as client:
    ...     rows = await get_all_rows(client, doc_id, "Tasks", use_column_names=True)

Main Exports:
    - CodaClient, create_client, create_client_auto: Client construction
    - ClientConfig, LogLevel: Configuration options
    - RequestEngine, CallDescriptor: Low-level call execution
    - CodaError and subclasses: Error taxonomy

Note: Prometheus export requires the 'full' extra. Install with:
    pip install coda-sdk[full]

Version: 1.0.0
"""

__version__ = "1.0.0"

from .cache import CacheStats, ResponseCache
from .client import CodaClient
from .config import (
    CONFIG_PROFILES,
    ClientConfig,
    EnvironmentTokenSource,
    LogLevel,
    config_for_profile,
    resolve_api_token,
)
from .engine import RequestEngine
from .exceptions import (
    BatchWriteError,
    CodaApiError,
    CodaError,
    ConfigurationError,
    ForbiddenError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from .factory import create_client, create_client_auto
from .mutations import MutationPoller
from .observability import (
    HealthReport,
    MetricsCollector,
    PerformanceWatcher,
    generate_health_report,
)
from .protocols import TransportProtocol, TransportResponse
from .ratelimit import SlidingWindowRateLimiter
from .transport import HttpxTransport
from .types import CallDescriptor, MutationHandle, MutationStatus, TrafficClass
from .validation import DataValidator

__all__ = [
    "CONFIG_PROFILES",
    # Exceptions
    "BatchWriteError",
    # Subsystems
    "CacheStats",
    # Types
    "CallDescriptor",
    # Configuration
    "ClientConfig",
    "CodaApiError",
    # Client
    "CodaClient",
    "CodaError",
    "ConfigurationError",
    "DataValidator",
    "EnvironmentTokenSource",
    "ForbiddenError",
    # Observability
    "HealthReport",
    # Transport
    "HttpxTransport",
    "InvalidRequestError",
    "LogLevel",
    "MetricsCollector",
    "MutationHandle",
    "MutationPoller",
    "MutationStatus",
    "NetworkError",
    "NotFoundError",
    "PerformanceWatcher",
    "RateLimitedError",
    "RequestEngine",
    "RequestTimeoutError",
    "ResponseCache",
    "ServerError",
    "SlidingWindowRateLimiter",
    "TrafficClass",
    "TransportProtocol",
    "TransportResponse",
    "UnauthorizedError",
    "ValidationError",
    "config_for_profile",
    "create_client",
    "create_client_auto",
    "generate_health_report",
    "resolve_api_token",
]
