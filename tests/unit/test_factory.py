"""Tests for the client factory functions."""

import pytest

from coda_sdk.config import EnvironmentTokenSource
from coda_sdk.exceptions import ConfigurationError
from coda_sdk.factory import (
    PROFILE_ENV_VAR,
    create_client,
    create_client_auto,
    profile_from_environment,
)


class TestCreateClient:
    def test_profile_applied(self, api_token, transport):
        client = create_client("testing", transport=transport, api_token=api_token)

        assert client.config.enable_cache is False
        assert client.config.enable_rate_limit is False
        assert client.config.max_retries == 1
        assert client.engine.cache is None

    def test_overrides_win(self, api_token, transport):
        client = create_client(
            "production", transport=transport, api_token=api_token, max_retries=7
        )

        assert client.config.max_retries == 7
        assert client.config.cache_ttl == 300.0

    def test_unknown_profile(self, api_token, transport):
        with pytest.raises(ConfigurationError):
            create_client("staging", transport=transport, api_token=api_token)

    def test_unknown_override(self, api_token, transport):
        with pytest.raises(ConfigurationError):
            create_client(
                "production", transport=transport, api_token=api_token, speed=9
            )

    def test_invalid_override_value(self, api_token, transport):
        with pytest.raises(ConfigurationError):
            create_client(
                "production", transport=transport, api_token=api_token, timeout=0
            )

    def test_token_from_source(self, api_token, transport):
        source = EnvironmentTokenSource(environ={"CODA_TOKEN": api_token})

        client = create_client(transport=transport, token_source=source)

        assert client.engine._headers()["Authorization"] == f"Bearer {api_token}"


class TestProfileFromEnvironment:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("production", "production"),
            ("PRODUCTION", "production"),
            ("test", "testing"),
            ("development", "development"),
            ("staging", "development"),
        ],
    )
    def test_mapping(self, value, expected):
        source = EnvironmentTokenSource(environ={PROFILE_ENV_VAR: value})
        assert profile_from_environment(source) == expected

    def test_unset(self, empty_env):
        assert profile_from_environment(empty_env) == "development"


def test_create_client_auto(api_token, transport):
    source = EnvironmentTokenSource(
        environ={PROFILE_ENV_VAR: "test", "CODA_API_TOKEN": api_token}
    )

    client = create_client_auto(transport=transport, token_source=source)

    assert client.config.enable_cache is False
    assert client.config.timeout == 5.0
