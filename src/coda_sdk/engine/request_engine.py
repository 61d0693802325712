# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request engine for the Coda SDK.

Executes one logical API call with governance and fault tolerance:

1. Rate limit admission for the call's traffic class
2. Response cache lookup for cacheable reads
3. Retry loop with exponential backoff and error classification
4. Cache store of successful cacheable results
5. One metrics record per logical call

Retry classification:
    - 400, 401, 403, 404, 422: raised immediately
    - 429: recorded as a rate limit hit and raised immediately
    - other non-2xx, NetworkError, RequestTimeoutError: retried up to
      ``max_retries`` times, then the last error is raised
    - any other exception raised by the transport is wrapped in NetworkError
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any, cast
from urllib.parse import urlencode

from .. import __version__
from ..cache.response_cache import ResponseCache
from ..config.settings import ClientConfig
from ..exceptions import (
    CodaApiError,
    ForbiddenError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
)
from ..observability.metrics import MetricsCollector, get_prometheus_request_metrics
from ..observability.protocols import RequestMetricsProtocol
from ..protocols.transport import TransportProtocol, TransportResponse
from ..ratelimit.limiter import SlidingWindowRateLimiter
from ..types.request import CallDescriptor, TrafficClass

logger = logging.getLogger(__name__)

USER_AGENT = f"coda-python-sdk/{__version__}"
DEFAULT_RETRY_AFTER_SECONDS = 60.0


def serialize_param(value: Any) -> str:
    """Render one query parameter value.

    Booleans become ``true``/``false`` and lists are comma-joined.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(serialize_param(v) for v in value)
    return str(value)


def serialize_params(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Drop None values and serialize the rest, sorted by key."""
    if not params:
        return []
    return [
        (key, serialize_param(value))
        for key, value in sorted(params.items())
        if value is not None
    ]


def build_url(
    base_url: str, endpoint: str, params: Mapping[str, Any] | None = None
) -> str:
    """Join base URL, endpoint and serialized query string."""
    url = f"{base_url.rstrip('/')}{endpoint}"
    query = serialize_params(params)
    if query:
        url = f"{url}?{urlencode(query)}"
    return url


def make_cache_key(descriptor: CallDescriptor) -> str:
    """Build the cache key ``"{METHOD} {endpoint}[?{sorted query}]"``.

    Parameter order never affects the key, and None-valued parameters are
    ignored, so equivalent reads share one entry.
    """
    key = f"{descriptor.method} {descriptor.endpoint}"
    query = serialize_params(descriptor.params)
    if query:
        key = f"{key}?{urlencode(query)}"
    return key


def parse_retry_after(value: str | None) -> float:
    """Seconds from a ``retry-after`` header. Missing or non-numeric gives 60."""
    if not value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        seconds = float(value)
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS
    return max(0.0, seconds)


def parse_body(response: TransportResponse) -> Any:
    """Decode a successful response: JSON when declared, raw text otherwise.

    Raises:
        ServerError: If the response declares JSON but the body is not JSON
    """
    if not response.is_json:
        return response.text
    if not response.text:
        return None
    try:
        return json.loads(response.text)
    except ValueError as e:
        raise ServerError(
            "Invalid JSON response body", response.status, response.text[:200]
        ) from e


def classify_error(response: TransportResponse) -> CodaApiError:
    """Turn a non-2xx response into the matching CodaApiError subclass."""
    details: Any = None
    if response.is_json and response.text:
        try:
            details = json.loads(response.text)
        except ValueError:
            # Undecodable error body: fall back to the generic message
            details = None

    message = f"HTTP {response.status}"
    if isinstance(details, dict) and details.get("message"):
        message = str(details["message"])

    status = response.status
    if status == 429:
        return RateLimitedError(
            retry_after=parse_retry_after(response.headers.get("retry-after")),
            details=details,
        )
    if status == 401:
        return UnauthorizedError(message, details)
    if status == 403:
        return ForbiddenError(message, details)
    if status == 404:
        return NotFoundError(message, details)
    if status in (400, 422):
        return InvalidRequestError(message, status, details)
    return ServerError(message, status, details)


class RequestEngine:
    """
    Executes CallDescriptors against the API.

    The rate limiter, cache and metrics collector are optional; passing None
    disables the corresponding step. ``from_config`` builds all three from
    a ClientConfig.

    Example:
        >>> engine = RequestEngine(config, token, HttpxTransport())
        >>> docs = await engine.execute(CallDescriptor("/docs"))
    """

    def __init__(
        self,
        config: ClientConfig,
        token: str,
        transport: TransportProtocol,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        cache: ResponseCache | None = None,
        metrics: RequestMetricsProtocol | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Base URL, retry and backoff settings
            token: Validated API token
            transport: Sends individual HTTP requests
            rate_limiter: Client-side limiter, or None to disable throttling
            cache: Response cache, or None to disable caching
            metrics: Metrics sink, or None to disable recording
        """
        self.config = config
        self._token = token
        self.transport = transport
        self.rate_limiter = rate_limiter
        self.cache = cache
        self.metrics = metrics

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        token: str,
        transport: TransportProtocol,
    ) -> RequestEngine:
        """Build an engine with the subsystems enabled in ``config``."""
        rate_limiter: SlidingWindowRateLimiter | None = None
        if config.enable_rate_limit:
            rate_limiter = SlidingWindowRateLimiter(
                window=config.rate_limit_window,
                read_limit=config.read_limit,
                write_limit=config.write_limit,
            )

        cache: ResponseCache | None = None
        if config.enable_cache:
            cache = ResponseCache(default_ttl=config.cache_ttl)

        metrics: MetricsCollector | None = None
        if config.enable_metrics:
            prometheus = None
            if config.enable_prometheus:
                prometheus = get_prometheus_request_metrics()
                if prometheus is None:
                    logger.warning(
                        "enable_prometheus is set but prometheus_client is not "
                        "installed; install the 'full' extra"
                    )
            metrics = MetricsCollector(prometheus=prometheus)

        return cls(config, token, transport, rate_limiter, cache, metrics)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (0-based)."""
        return float(min(self.config.backoff_base**attempt, self.config.max_backoff))

    async def execute(self, descriptor: CallDescriptor) -> Any:
        """
        Execute one logical call.

        Args:
            descriptor: The call to make

        Returns:
            Parsed JSON payload, raw text for non-JSON responses, or None for
            an empty JSON body

        Raises:
            CodaApiError: Classified failure (see module docstring)
        """
        if self.rate_limiter is not None:
            traffic_class = cast(TrafficClass, descriptor.traffic_class)
            await self.rate_limiter.acquire_slot(traffic_class)

        use_cache = self.cache is not None and descriptor.cacheable
        cache_key = make_cache_key(descriptor) if use_cache else None

        if self.cache is not None and cache_key is not None:
            lookup_start = time.monotonic()
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit: {cache_key}")
                if self.metrics is not None:
                    self.metrics.record_request(
                        (time.monotonic() - lookup_start) * 1000.0,
                        success=True,
                        from_cache=True,
                    )
                return cached

        start = time.monotonic()
        try:
            result = await self._execute_with_retry(descriptor)
        except Exception:
            self._record(start, success=False)
            raise

        if self.cache is not None and cache_key is not None and result is not None:
            ttl = descriptor.cache_ttl or self.config.cache_ttl
            self.cache.set(cache_key, result, ttl)

        self._record(start, success=True)
        return result

    def _record(self, start: float, success: bool) -> None:
        if self.metrics is not None:
            self.metrics.record_request(
                (time.monotonic() - start) * 1000.0, success=success
            )

    async def _execute_with_retry(self, descriptor: CallDescriptor) -> Any:
        url = build_url(self.config.base_url, descriptor.endpoint, descriptor.params)
        body = None
        if descriptor.body is not None and descriptor.method != "GET":
            body = json.dumps(descriptor.body)

        max_retries = self.config.max_retries
        attempt = 0

        while True:
            try:
                logger.debug(f"{descriptor.method} {url} (attempt {attempt + 1})")
                try:
                    response = await self.transport.send(
                        url, descriptor.method, self._headers(), body
                    )
                except CodaApiError:
                    raise
                except Exception as e:
                    raise NetworkError(
                        f"{descriptor.method} {url} failed: {e!r}"
                    ) from e
                if not response.ok:
                    raise classify_error(response)
                return parse_body(response)
            except RateLimitedError as e:
                if self.metrics is not None:
                    self.metrics.record_rate_limit()
                logger.warning(
                    f"Rate limited by server on {descriptor.method} "
                    f"{descriptor.endpoint}, retry after {e.retry_after:g}s"
                )
                raise
            except CodaApiError as e:
                if not e.retryable:
                    raise
                if attempt >= max_retries:
                    logger.error(
                        f"{descriptor.method} {descriptor.endpoint} failed after "
                        f"{attempt + 1} attempts: {e.message}"
                    )
                    raise
                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"{descriptor.method} {descriptor.endpoint} failed "
                    f"(attempt {attempt + 1}/{max_retries + 1}): {e.message}. "
                    f"Retrying in {delay:g}s"
                )

            await asyncio.sleep(delay)
            attempt += 1

    def get_stats(self) -> dict[str, dict[str, Any] | None]:
        """Stats of each enabled subsystem; None for a disabled one."""
        metrics: dict[str, Any] | None = None
        if isinstance(self.metrics, MetricsCollector):
            metrics = self.metrics.get_detailed_stats().to_dict()
        return {
            "metrics": metrics,
            "cache": self.cache.get_stats().to_dict() if self.cache else None,
            "rate_limiter": (
                self.rate_limiter.get_stats().to_dict() if self.rate_limiter else None
            ),
        }


__all__ = [
    "DEFAULT_RETRY_AFTER_SECONDS",
    "USER_AGENT",
    "RequestEngine",
    "build_url",
    "classify_error",
    "make_cache_key",
    "parse_body",
    "parse_retry_after",
    "serialize_param",
    "serialize_params",
]
