# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Response caching."""

from .response_cache import DEFAULT_TTL_SECONDS, CacheEntry, CacheStats, ResponseCache

__all__ = ["DEFAULT_TTL_SECONDS", "CacheEntry", "CacheStats", "ResponseCache"]
