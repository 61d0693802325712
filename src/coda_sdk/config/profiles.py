# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Named configuration presets.

Each profile is a set of ClientConfig overrides. Profiles never carry a
token; credentials are resolved separately.
"""

from dataclasses import replace
from typing import Any

from .settings import ClientConfig, LogLevel

CONFIG_PROFILES: dict[str, dict[str, Any]] = {
    "development": {
        "log_level": LogLevel.DEBUG,
        "enable_cache": True,
        "enable_rate_limit": True,
        "enable_metrics": True,
        "cache_ttl": 60.0,
        "max_retries": 2,
        "timeout": 10.0,
    },
    "production": {
        "log_level": LogLevel.ERROR,
        "enable_cache": True,
        "enable_rate_limit": True,
        "enable_metrics": True,
        "cache_ttl": 300.0,
        "max_retries": 3,
        "timeout": 30.0,
    },
    "testing": {
        "log_level": LogLevel.WARN,
        "enable_cache": False,
        "enable_rate_limit": False,
        "enable_metrics": True,
        "max_retries": 1,
        "timeout": 5.0,
    },
    "high_performance": {
        "log_level": LogLevel.ERROR,
        "enable_cache": True,
        "enable_rate_limit": True,
        "enable_metrics": True,
        "cache_ttl": 600.0,
        "max_retries": 5,
        "timeout": 60.0,
    },
    "debug": {
        "log_level": LogLevel.DEBUG,
        "enable_cache": True,
        "enable_rate_limit": False,
        "enable_metrics": True,
        "cache_ttl": 30.0,
        "max_retries": 1,
        "timeout": 15.0,
    },
}


def config_for_profile(profile: str, **overrides: Any) -> ClientConfig:
    """
    Build a ClientConfig from a named profile plus explicit overrides.

    Args:
        profile: One of the keys of CONFIG_PROFILES (case-insensitive,
            hyphens accepted in place of underscores)
        **overrides: ClientConfig fields that take precedence over the profile

    Raises:
        ValueError: If the profile is unknown
    """
    key = profile.lower().replace("-", "_")
    try:
        preset = CONFIG_PROFILES[key]
    except KeyError as e:
        known = ", ".join(sorted(CONFIG_PROFILES))
        raise ValueError(f"Unknown profile: {profile} (expected one of {known})") from e
    return replace(ClientConfig(**preset), **overrides)


__all__ = ["CONFIG_PROFILES", "config_for_profile"]
