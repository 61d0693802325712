# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the ``coda_sdk`` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`

Label Best Practices:
    Only ``outcome`` (success, failure, cache) is used as a label. Endpoints,
    doc ids and row ids are unbounded and must never become labels.
"""

METRIC_PREFIX = "coda_sdk"
"""Prefix for all Prometheus metrics in this library."""

REQUESTS_TOTAL = f"{METRIC_PREFIX}_requests_total"
"""Total logical API calls, labelled by outcome."""

RATE_LIMIT_HITS_TOTAL = f"{METRIC_PREFIX}_rate_limit_hits_total"
"""Total HTTP 429 responses received from the server."""

REQUEST_DURATION_SECONDS = f"{METRIC_PREFIX}_request_duration_seconds"
"""Histogram of logical call durations, retries and backoff included."""

OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"
OUTCOME_CACHE = "cache"

__all__ = [
    "METRIC_PREFIX",
    "OUTCOME_CACHE",
    "OUTCOME_FAILURE",
    "OUTCOME_SUCCESS",
    "RATE_LIMIT_HITS_TOTAL",
    "REQUESTS_TOTAL",
    "REQUEST_DURATION_SECONDS",
]
