# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the Coda SDK.

This module provides:
- ClientConfig: Settings for the client and its request engine
- LogLevel / configure_logging: SDK log verbosity
- CONFIG_PROFILES / config_for_profile: Named presets
- resolve_api_token / EnvironmentTokenSource: Credential lookup
"""

from .credentials import (
    MIN_TOKEN_LENGTH,
    TOKEN_ENV_VARS,
    EnvironmentTokenSource,
    resolve_api_token,
    validate_token,
)
from .profiles import CONFIG_PROFILES, config_for_profile
from .settings import (
    DEFAULT_BASE_URL,
    PACKAGE_LOGGER,
    ClientConfig,
    LogLevel,
    configure_logging,
)

__all__ = [
    # Profiles
    "CONFIG_PROFILES",
    # Settings
    "DEFAULT_BASE_URL",
    # Credentials
    "MIN_TOKEN_LENGTH",
    "PACKAGE_LOGGER",
    "TOKEN_ENV_VARS",
    "ClientConfig",
    "EnvironmentTokenSource",
    "LogLevel",
    "config_for_profile",
    "configure_logging",
    "resolve_api_token",
    "validate_token",
]
