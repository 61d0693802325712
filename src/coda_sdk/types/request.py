# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Call descriptor types for the request engine.

A CallDescriptor captures everything the engine needs to execute one logical
API call: where it goes, how, with which payload, and which rate limit budget
it draws from.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TrafficClass(Enum):
    """
    Rate limit budget a call is charged against.

    The remote API enforces separate budgets for reads and writes, so the
    client-side limiter tracks them independently: saturating one class
    never delays calls of the other.
    """

    READ = "read"
    WRITE = "write"


READ_METHODS = frozenset({"GET", "HEAD"})


@dataclass(frozen=True)
class CallDescriptor:
    """
    Immutable description of a single logical API call.

    Attributes:
        endpoint: Path relative to the base URL (e.g. ``/docs/abc/tables``)
        method: HTTP method, upper case
        body: JSON-serializable request payload, or None
        params: Query parameters; None values are dropped at serialization
        traffic_class: Rate limit class. Derived from the method when not
            given: READ for GET/HEAD, WRITE for everything else.
        use_cache: Per-call cache override. None means "cache if the call is
            a read"; False bypasses the cache for both lookup and store.
        cache_ttl: Per-call cache TTL in seconds (engine default when None)
    """

    endpoint: str
    method: str = "GET"
    body: Any | None = None
    params: Mapping[str, Any] | None = None
    traffic_class: TrafficClass | None = field(default=None)
    use_cache: bool | None = None
    cache_ttl: float | None = None

    def __post_init__(self) -> None:
        method = self.method.upper()
        object.__setattr__(self, "method", method)
        if self.traffic_class is None:
            derived = (
                TrafficClass.READ if method in READ_METHODS else TrafficClass.WRITE
            )
            object.__setattr__(self, "traffic_class", derived)

    @property
    def is_read(self) -> bool:
        """True for idempotent read calls."""
        return self.method in READ_METHODS

    @property
    def cacheable(self) -> bool:
        """Whether the engine may serve or store this call from the cache."""
        if self.use_cache is False:
            return False
        return self.method == "GET"


__all__ = ["READ_METHODS", "CallDescriptor", "TrafficClass"]
