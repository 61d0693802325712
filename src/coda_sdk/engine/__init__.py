# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Request execution: retry, backoff, caching and rate limiting."""

from .request_engine import (
    DEFAULT_RETRY_AFTER_SECONDS,
    USER_AGENT,
    RequestEngine,
    build_url,
    classify_error,
    make_cache_key,
    parse_body,
    parse_retry_after,
)

__all__ = [
    "DEFAULT_RETRY_AFTER_SECONDS",
    "USER_AGENT",
    "RequestEngine",
    "build_url",
    "classify_error",
    "make_cache_key",
    "parse_body",
    "parse_retry_after",
]
