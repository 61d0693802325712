# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Default transport built on httpx.

Maps httpx failures onto the SDK's exception taxonomy so the request engine
can classify them without knowing which HTTP library is in use.
"""

import logging
from collections.abc import Mapping

import httpx

from ..exceptions import NetworkError, RequestTimeoutError
from ..protocols.transport import TransportResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """
    Transport that sends requests through a shared ``httpx.AsyncClient``.

    The client is created lazily on first use and reused for every call
    until ``aclose()``.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def send(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: str | None = None,
    ) -> TransportResponse:
        client = self._get_client()
        try:
            response = await client.request(
                method,
                url,
                headers=dict(headers),
                content=body,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"{method} {url} timed out after {self._timeout}s",
                timeout=self._timeout,
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        return TransportResponse(
            status=response.status_code,
            headers=dict(response.headers),
            text=response.text,
        )

    async def aclose(self) -> None:
        """Close the client if this transport created it; a borrowed one stays open."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("HttpxTransport closed")


__all__ = ["HttpxTransport"]
