# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for the HTTP transport collaborator."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    """
    Raw response handed back by a transport.

    Header names are normalized to lower case so lookups are
    case-insensitive.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    text: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "headers", {k.lower(): v for k, v in self.headers.items()}
        )

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def is_json(self) -> bool:
        return "application/json" in self.content_type


@runtime_checkable
class TransportProtocol(Protocol):
    """
    Minimal protocol for sending one HTTP request.

    The request engine owns retries, headers and body serialization; a
    transport only moves bytes. Implementations must raise
    ``coda_sdk.exceptions.NetworkError`` when no response could be obtained
    and ``coda_sdk.exceptions.RequestTimeoutError`` when the attempt exceeded
    its timeout. Non-2xx responses are returned, not raised.
    """

    async def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> TransportResponse:
        """Send a request and return the raw response."""
        ...

    async def aclose(self) -> None:
        """Release any held connections."""
        ...
