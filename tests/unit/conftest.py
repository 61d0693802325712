"""
Shared fixtures for the coda_sdk unit tests.

The transport is always faked: FakeTransport replays queued responses (or
raises queued exceptions) and records every request it was asked to send.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import pytest

from coda_sdk.config import ClientConfig, EnvironmentTokenSource
from coda_sdk.protocols import TransportResponse

VALID_TOKEN = "a1b2c3d4-e5f6a7b8-c9d0e1f2-a3b4c5d6"


class FakeTransport:
    """TransportProtocol implementation backed by a response queue."""

    def __init__(self, *responses: TransportResponse | Exception) -> None:
        self.responses: list[TransportResponse | Exception] = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def queue(self, *responses: TransportResponse | Exception) -> None:
        self.responses.extend(responses)

    async def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> TransportResponse:
        self.calls.append(
            {"url": url, "method": method, "headers": dict(headers), "body": body}
        )
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def body(self, index: int = -1) -> Any:
        raw = self.calls[index]["body"]
        return json.loads(raw) if raw is not None else None


def make_json_response(
    payload: Any, status: int = 200, headers: Mapping[str, str] | None = None
) -> TransportResponse:
    return TransportResponse(
        status=status,
        headers={"Content-Type": "application/json", **(headers or {})},
        text=json.dumps(payload),
    )


@pytest.fixture
def api_token() -> str:
    """A token that passes the shape check."""
    return VALID_TOKEN


@pytest.fixture
def transport() -> FakeTransport:
    """An empty fake transport; queue responses per test."""
    return FakeTransport()


@pytest.fixture
def json_response():
    """Factory building JSON TransportResponses."""
    return make_json_response


@pytest.fixture
def empty_env() -> EnvironmentTokenSource:
    """A token source with no variables set."""
    return EnvironmentTokenSource(environ={})


@pytest.fixture
def config(api_token: str) -> ClientConfig:
    """Config with an explicit token and fast, deterministic settings."""
    return ClientConfig(api_token=api_token, max_retries=2)


class FakeClock:
    """Monotonic clock advanced by hand (or by patched sleeps)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def monotonic(self) -> float:
        return self.now

    def time(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
