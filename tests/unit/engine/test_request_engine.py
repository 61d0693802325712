"""Tests for RequestEngine and its request/response helpers."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from coda_sdk.config import ClientConfig
from coda_sdk.engine.request_engine import (
    DEFAULT_RETRY_AFTER_SECONDS,
    RequestEngine,
    build_url,
    classify_error,
    make_cache_key,
    parse_body,
    parse_retry_after,
    serialize_param,
)
from coda_sdk.exceptions import (
    ForbiddenError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
)
from coda_sdk.protocols import TransportProtocol, TransportResponse
from coda_sdk.types.request import CallDescriptor, TrafficClass


@pytest.fixture
def engine(config, transport):
    return RequestEngine.from_config(config, config.api_token, transport)


@pytest.fixture
def no_sleep():
    """Replace the backoff sleep with a recording AsyncMock."""
    sleep = AsyncMock()
    with patch("coda_sdk.engine.request_engine.asyncio.sleep", sleep):
        yield sleep


def respond(payload, status=200, headers=None):
    return TransportResponse(
        status,
        {"Content-Type": "application/json", **(headers or {})},
        json.dumps(payload),
    )


class TestSerialization:
    def test_serialize_param(self):
        assert serialize_param(True) == "true"
        assert serialize_param(False) == "false"
        assert serialize_param(["a", "b"]) == "a,b"
        assert serialize_param(5) == "5"

    def test_build_url_drops_none_and_sorts(self):
        url = build_url(
            "https://coda.io/apis/v1/",
            "/docs",
            {"limit": 5, "isOwner": True, "query": None},
        )
        assert url == "https://coda.io/apis/v1/docs?isOwner=true&limit=5"

    def test_build_url_without_params(self):
        assert build_url("https://x", "/whoami") == "https://x/whoami"

    def test_cache_key_ignores_param_order(self):
        a = CallDescriptor("/docs", params={"limit": 5, "query": "x"})
        b = CallDescriptor("/docs", params={"query": "x", "limit": 5})
        assert make_cache_key(a) == make_cache_key(b) == "GET /docs?limit=5&query=x"

    def test_cache_key_ignores_none_params(self):
        a = CallDescriptor("/docs", params={"limit": None})
        assert make_cache_key(a) == "GET /docs"


class TestResponseParsing:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, DEFAULT_RETRY_AFTER_SECONDS),
            ("", DEFAULT_RETRY_AFTER_SECONDS),
            ("soon", DEFAULT_RETRY_AFTER_SECONDS),
            ("2.5", 2.5),
            ("-3", 0.0),
        ],
    )
    def test_parse_retry_after(self, value, expected):
        assert parse_retry_after(value) == expected

    def test_parse_body_json(self):
        assert parse_body(respond({"a": 1})) == {"a": 1}

    def test_parse_body_text(self):
        response = TransportResponse(200, {"Content-Type": "text/plain"}, "hello")
        assert parse_body(response) == "hello"

    def test_parse_body_empty_json(self):
        response = TransportResponse(204, {"Content-Type": "application/json"}, "")
        assert parse_body(response) is None

    def test_parse_body_invalid_json(self):
        response = TransportResponse(200, {"Content-Type": "application/json"}, "{oops")
        with pytest.raises(ServerError) as exc_info:
            parse_body(response)
        assert exc_info.value.retryable

    @pytest.mark.parametrize(
        "status,error_type",
        [
            (400, InvalidRequestError),
            (401, UnauthorizedError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (422, InvalidRequestError),
            (429, RateLimitedError),
            (500, ServerError),
            (503, ServerError),
            (418, ServerError),
        ],
    )
    def test_classify_error(self, status, error_type):
        error = classify_error(respond({}, status=status))
        assert isinstance(error, error_type)
        assert error.status_code == status

    def test_classify_error_uses_server_message(self):
        error = classify_error(
            respond({"message": "Row not found"}, status=404)
        )
        assert error.message == "Row not found"
        assert error.details == {"message": "Row not found"}

    def test_classify_error_without_body(self):
        error = classify_error(TransportResponse(502, {}, "Bad Gateway"))
        assert error.message == "HTTP 502"
        assert error.details is None


class TestHeadersAndBody:
    @pytest.mark.asyncio
    async def test_sends_auth_and_user_agent(self, engine, transport):
        transport.queue(respond({"name": "me"}))

        await engine.execute(CallDescriptor("/whoami"))

        headers = transport.calls[0]["headers"]
        assert headers["Authorization"] == f"Bearer {engine.config.api_token}"
        assert headers["Content-Type"] == "application/json"
        assert headers["User-Agent"].startswith("coda-python-sdk/")

    @pytest.mark.asyncio
    async def test_write_body_is_json(self, engine, transport):
        transport.queue(respond({"requestId": "r1"}))

        await engine.execute(CallDescriptor("/docs", "POST", body={"title": "T"}))

        assert transport.calls[0]["method"] == "POST"
        assert transport.body(0) == {"title": "T"}

    @pytest.mark.asyncio
    async def test_get_never_sends_body(self, engine, transport):
        transport.queue(respond({}))

        await engine.execute(CallDescriptor("/docs", body={"ignored": True}))

        assert transport.calls[0]["body"] is None

    @pytest.mark.asyncio
    async def test_url_includes_query(self, engine, transport):
        transport.queue(respond({"items": []}))

        await engine.execute(CallDescriptor("/docs", params={"limit": 10}))

        assert transport.calls[0]["url"] == "https://coda.io/apis/v1/docs?limit=10"


class TestErrorHandling:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_type",
        [
            (400, InvalidRequestError),
            (401, UnauthorizedError),
            (403, ForbiddenError),
            (404, NotFoundError),
            (422, InvalidRequestError),
        ],
    )
    async def test_client_errors_are_not_retried(
        self, engine, transport, no_sleep, status, error_type
    ):
        transport.queue(respond({"message": "no"}, status=status))

        with pytest.raises(error_type):
            await engine.execute(CallDescriptor("/docs"))

        assert transport.call_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_limited_is_raised_and_recorded(
        self, engine, transport, no_sleep
    ):
        transport.queue(
            respond({}, status=429, headers={"Retry-After": "5"})
        )

        with pytest.raises(RateLimitedError) as exc_info:
            await engine.execute(CallDescriptor("/docs"))

        assert exc_info.value.retry_after == 5.0
        assert transport.call_count == 1
        no_sleep.assert_not_awaited()
        stats = engine.metrics.get_stats()
        assert stats.rate_limit_hits == 1
        assert stats.failed_requests == 1

    @pytest.mark.asyncio
    async def test_server_error_retried_with_backoff(self, engine, transport, no_sleep):
        transport.queue(
            respond({}, status=500),
            respond({}, status=502),
            respond({}, status=503),
        )

        with pytest.raises(ServerError) as exc_info:
            await engine.execute(CallDescriptor("/docs"))

        assert exc_info.value.status_code == 503
        assert transport.call_count == 3
        assert [c.args[0] for c in no_sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(
        self, engine, transport, no_sleep
    ):
        transport.queue(
            NetworkError("connection reset"),
            RequestTimeoutError(timeout=30.0),
            respond({"ok": True}),
        )

        result = await engine.execute(CallDescriptor("/docs"))

        assert result == {"ok": True}
        assert transport.call_count == 3

    @pytest.mark.asyncio
    async def test_no_retries_when_disabled(self, api_token, transport, no_sleep):
        engine = RequestEngine.from_config(
            ClientConfig(api_token=api_token, max_retries=0), api_token, transport
        )
        transport.queue(respond({}, status=500))

        with pytest.raises(ServerError):
            await engine.execute(CallDescriptor("/docs"))

        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_failure_recorded_once_per_call(self, engine, transport, no_sleep):
        transport.queue(*[respond({}, status=500)] * 3)

        with pytest.raises(ServerError):
            await engine.execute(CallDescriptor("/docs"))

        stats = engine.metrics.get_stats()
        assert stats.total_requests == 1
        assert stats.failed_requests == 1

    @pytest.mark.asyncio
    async def test_foreign_transport_error_is_retried(
        self, engine, transport, no_sleep
    ):
        transport.queue(ConnectionResetError("reset"), respond({"ok": True}))

        result = await engine.execute(CallDescriptor("/docs"))

        assert result == {"ok": True}
        assert transport.call_count == 2
        assert [c.args[0] for c in no_sleep.await_args_list] == [1.0]
        stats = engine.metrics.get_stats()
        assert stats.total_requests == 1
        assert stats.successful_requests == 1

    @pytest.mark.asyncio
    async def test_foreign_transport_error_surfaces_as_network_error(
        self, engine, transport, no_sleep
    ):
        transport.queue(*[OSError("unreachable")] * 3)

        with pytest.raises(NetworkError) as exc_info:
            await engine.execute(CallDescriptor("/docs"))

        assert isinstance(exc_info.value.__cause__, OSError)
        assert transport.call_count == 3
        assert engine.metrics.get_stats().failed_requests == 1

    @pytest.mark.asyncio
    async def test_unserializable_body_is_recorded(self, engine, transport):
        with pytest.raises(TypeError):
            await engine.execute(
                CallDescriptor("/docs", "POST", body={"when": object()})
            )

        assert transport.call_count == 0
        stats = engine.metrics.get_stats()
        assert stats.total_requests == 1
        assert stats.failed_requests == 1

    def test_backoff_delay_is_capped(self, api_token, transport):
        engine = RequestEngine(
            ClientConfig(api_token=api_token, max_backoff=5.0), api_token, transport
        )
        assert engine.backoff_delay(0) == 1.0
        assert engine.backoff_delay(2) == 4.0
        assert engine.backoff_delay(10) == 5.0


class TestCaching:
    @pytest.mark.asyncio
    async def test_repeated_read_served_from_cache(self, engine, transport):
        transport.queue(respond({"items": [1]}))

        first = await engine.execute(CallDescriptor("/docs"))
        second = await engine.execute(CallDescriptor("/docs"))

        assert first == second == {"items": [1]}
        assert transport.call_count == 1
        stats = engine.metrics.get_stats()
        assert stats.total_requests == 2
        assert stats.cache_hits == 1
        assert stats.successful_requests == 1

    @pytest.mark.asyncio
    async def test_use_cache_false_bypasses(self, engine, transport):
        transport.queue(respond({"n": 1}), respond({"n": 2}))

        await engine.execute(CallDescriptor("/docs", use_cache=False))
        result = await engine.execute(CallDescriptor("/docs", use_cache=False))

        assert result == {"n": 2}
        assert transport.call_count == 2
        assert len(engine.cache) == 0

    @pytest.mark.asyncio
    async def test_writes_are_not_cached(self, engine, transport):
        transport.queue(
            respond({"requestId": "a"}),
            respond({"requestId": "b"}),
        )

        await engine.execute(CallDescriptor("/docs", "POST", body={}))
        await engine.execute(CallDescriptor("/docs", "POST", body={}))

        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_failed_read_not_cached(self, engine, transport):
        transport.queue(
            respond({}, status=404), respond({"id": "d1"})
        )

        with pytest.raises(NotFoundError):
            await engine.execute(CallDescriptor("/docs/d1"))
        result = await engine.execute(CallDescriptor("/docs/d1"))

        assert result == {"id": "d1"}

    @pytest.mark.asyncio
    async def test_cache_disabled(self, api_token, transport):
        engine = RequestEngine.from_config(
            ClientConfig(api_token=api_token, enable_cache=False), api_token, transport
        )
        transport.queue(respond({}), respond({}))

        await engine.execute(CallDescriptor("/docs"))
        await engine.execute(CallDescriptor("/docs"))

        assert engine.cache is None
        assert transport.call_count == 2


class TestConstruction:
    def test_from_config_builds_enabled_subsystems(self, engine):
        assert engine.rate_limiter is not None
        assert engine.cache is not None
        assert engine.metrics is not None

    def test_from_config_disables_subsystems(self, api_token, transport):
        config = ClientConfig(
            api_token=api_token,
            enable_cache=False,
            enable_rate_limit=False,
            enable_metrics=False,
        )
        engine = RequestEngine.from_config(config, api_token, transport)

        assert engine.rate_limiter is None
        assert engine.cache is None
        assert engine.metrics is None
        assert engine.get_stats() == {
            "metrics": None,
            "cache": None,
            "rate_limiter": None,
        }

    @pytest.mark.asyncio
    async def test_get_stats(self, engine, transport):
        transport.queue(respond({}))
        await engine.execute(CallDescriptor("/docs"))

        stats = engine.get_stats()

        assert stats["metrics"]["total_requests"] == 1
        assert stats["cache"]["size"] == 1
        assert stats["rate_limiter"]["read_requests"] == 1

    @pytest.mark.asyncio
    async def test_writes_charged_to_write_class(self, engine, transport):
        transport.queue(respond({"requestId": "r"}))

        await engine.execute(CallDescriptor("/docs/d/tables/t/rows", "DELETE"))

        stats = engine.rate_limiter.get_stats()
        assert stats.write_requests == 1
        assert stats.read_requests == 0

    @pytest.mark.asyncio
    async def test_explicit_traffic_class_is_charged(self, engine, transport):
        transport.queue(respond({"items": []}))

        await engine.execute(
            CallDescriptor("/docs", traffic_class=TrafficClass.WRITE)
        )

        stats = engine.rate_limiter.get_stats()
        assert stats.write_requests == 1
        assert stats.read_requests == 0


def test_fake_transport_is_a_transport(transport):
    assert isinstance(transport, TransportProtocol)
