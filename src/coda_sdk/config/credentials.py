# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
API token resolution.

The token is looked up once, at client construction: an explicit value wins,
then the environment. The environment is an explicit EnvironmentTokenSource
object rather than ambient state, so tests and multi-tenant applications can
hand each client its own source.
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

from ..exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

TOKEN_ENV_VARS = ("CODA_API_TOKEN", "CODA_TOKEN")

MIN_TOKEN_LENGTH = 20

_TOKEN_SEPARATORS = re.compile(r"[-_]")
_TOKEN_CHARSET = re.compile(r"^[A-Za-z0-9]+$")


class EnvironmentTokenSource:
    """
    Read-only view over environment variables used for token lookup.

    Values from a dotenv file are read with ``dotenv_values`` and never
    written into ``os.environ``. Process environment variables take
    precedence over the file.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        dotenv_path: str | Path | None = None,
    ) -> None:
        values: dict[str, str] = {}
        if dotenv_path is not None:
            path = Path(dotenv_path)
            if path.is_file():
                values.update(
                    {k: v for k, v in dotenv_values(path).items() if v is not None}
                )
            else:
                logger.debug(f"Dotenv file {path} not found, skipping")
        values.update(os.environ if environ is None else environ)
        self._values = values

    def get(self, name: str) -> str | None:
        value = self._values.get(name)
        return value.strip() if value else None

    def lookup_token(self) -> str | None:
        """Return the first non-empty token variable, or None."""
        for name in TOKEN_ENV_VARS:
            value = self.get(name)
            if value:
                logger.debug(f"API token resolved from {name}")
                return value
        return None


def validate_token(token: str) -> None:
    """Check the basic shape of an API token.

    Separator characters (``-`` and ``_``) are ignored; what remains must be
    at least MIN_TOKEN_LENGTH ASCII letters or digits.

    Raises:
        UnauthorizedError: If the token is malformed.
    """
    stripped = _TOKEN_SEPARATORS.sub("", token)
    if len(stripped) < MIN_TOKEN_LENGTH:
        raise UnauthorizedError(
            f"API token is too short (expected at least {MIN_TOKEN_LENGTH} "
            "characters excluding separators)"
        )
    if not _TOKEN_CHARSET.match(stripped):
        raise UnauthorizedError("API token contains invalid characters")


def resolve_api_token(
    explicit: str | None = None,
    source: EnvironmentTokenSource | None = None,
) -> str:
    """
    Resolve and validate the API token.

    Args:
        explicit: Token passed in configuration; takes precedence
        source: Environment to fall back on (process environment when None)

    Returns:
        The validated token

    Raises:
        UnauthorizedError: If no token is found or the token is malformed
    """
    token = explicit.strip() if explicit else None
    if not token:
        token = (source or EnvironmentTokenSource()).lookup_token()
    if not token:
        raise UnauthorizedError(
            "Coda API token required. Set CODA_API_TOKEN in the environment "
            "or pass api_token in ClientConfig."
        )
    validate_token(token)
    return token


__all__ = [
    "MIN_TOKEN_LENGTH",
    "TOKEN_ENV_VARS",
    "EnvironmentTokenSource",
    "resolve_api_token",
    "validate_token",
]
