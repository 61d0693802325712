# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Factory functions building CodaClients from named profiles."""

import logging
from typing import Any

from .client import CodaClient
from .config.credentials import EnvironmentTokenSource
from .config.profiles import config_for_profile
from .exceptions import ConfigurationError
from .protocols.transport import TransportProtocol

logger = logging.getLogger(__name__)

PROFILE_ENV_VAR = "CODA_SDK_ENV"

_ENVIRONMENT_PROFILES = {
    "production": "production",
    "test": "testing",
}


def create_client(
    profile: str = "production",
    transport: TransportProtocol | None = None,
    token_source: EnvironmentTokenSource | None = None,
    **overrides: Any,
) -> CodaClient:
    """
    Create a client from a profile preset.

    Args:
        profile: Profile name (development, production, testing,
            high_performance, debug)
        transport: Optional transport (HttpxTransport when None)
        token_source: Environment used for token lookup
        **overrides: ClientConfig fields that take precedence over the profile

    Returns:
        Configured CodaClient

    Raises:
        ConfigurationError: If the profile is unknown or an override is
            not a ClientConfig field
        UnauthorizedError: If no token can be resolved
    """
    try:
        config = config_for_profile(profile, **overrides)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(str(e)) from e
    return CodaClient(config, transport=transport, token_source=token_source)


def profile_from_environment(source: EnvironmentTokenSource | None = None) -> str:
    """Map CODA_SDK_ENV to a profile name; anything unrecognized is development."""
    env = ((source or EnvironmentTokenSource()).get(PROFILE_ENV_VAR) or "").lower()
    return _ENVIRONMENT_PROFILES.get(env, "development")


def create_client_auto(
    transport: TransportProtocol | None = None,
    token_source: EnvironmentTokenSource | None = None,
    **overrides: Any,
) -> CodaClient:
    """Create a client whose profile is chosen from CODA_SDK_ENV."""
    source = token_source or EnvironmentTokenSource()
    profile = profile_from_environment(source)
    logger.debug(f"Selected profile '{profile}' from {PROFILE_ENV_VAR}")
    return create_client(profile, transport=transport, token_source=source, **overrides)


__all__ = [
    "PROFILE_ENV_VAR",
    "create_client",
    "create_client_auto",
    "profile_from_environment",
]
