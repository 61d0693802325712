# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Mutation status polling.

Status polls are ordinary read calls through the request engine, so they are
rate limited, retried and recorded like any other read. They always bypass
the response cache: a cached ``inProgress`` would never advance.
"""

import asyncio
import logging
import time
from urllib.parse import quote

from ..engine.request_engine import RequestEngine
from ..exceptions import RequestTimeoutError, ServerError
from ..types.mutation import MutationHandle
from ..types.request import CallDescriptor

logger = logging.getLogger(__name__)

DEFAULT_MAX_WAIT_TIME = 30.0
DEFAULT_POLL_INTERVAL = 1.0


class MutationPoller:
    """
    Waits for submitted mutations to reach a terminal state.

    Example:
        >>> poller = MutationPoller(engine)
        >>> handle = await poller.wait_for_mutation(result["requestId"])
        >>> if handle.status is MutationStatus.FAILED:
        ...     logger.error(handle.error)
    """

    def __init__(self, engine: RequestEngine) -> None:
        self._engine = engine

    async def get_status(self, request_id: str) -> MutationHandle:
        """
        Poll the mutation status endpoint once.

        Raises:
            CodaApiError: If the status call fails
            ServerError: If the response is not a recognizable status payload
        """
        payload = await self._engine.execute(
            CallDescriptor(
                endpoint=f"/mutationStatus/{quote(request_id, safe='')}",
                use_cache=False,
            )
        )
        if not isinstance(payload, dict):
            raise ServerError(f"Unexpected mutation status payload for {request_id}")
        try:
            return MutationHandle.from_response(request_id, payload)
        except ValueError as e:
            raise ServerError(
                f"Unknown mutation status {payload.get('status')!r} for {request_id}",
                details=payload,
            ) from e

    async def wait_for_mutation(
        self,
        request_id: str,
        max_wait_time: float = DEFAULT_MAX_WAIT_TIME,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> MutationHandle:
        """
        Poll until the mutation is COMPLETE or FAILED.

        A FAILED mutation is returned, not raised; inspect ``handle.status``
        and ``handle.error``.

        Args:
            request_id: Request id returned by the write call
            max_wait_time: Deadline in seconds, measured on a monotonic clock
            poll_interval: Seconds to sleep between polls

        Returns:
            The terminal MutationHandle

        Raises:
            RequestTimeoutError: If no terminal state is seen before the deadline
        """
        if max_wait_time <= 0:
            raise ValueError("max_wait_time must be positive")
        if poll_interval < 0:
            raise ValueError("poll_interval must be non-negative")

        start = time.monotonic()
        polls = 0

        while time.monotonic() - start < max_wait_time:
            handle = await self.get_status(request_id)
            polls += 1
            if handle.is_terminal:
                logger.debug(
                    f"Mutation {request_id} {handle.status.value} after {polls} polls"
                )
                return handle
            await asyncio.sleep(poll_interval)

        logger.warning(
            f"Mutation {request_id} still in progress after {max_wait_time:g}s "
            f"({polls} polls)"
        )
        raise RequestTimeoutError(
            f"Mutation {request_id} did not complete within {max_wait_time:g}s",
            timeout=max_wait_time,
        )


__all__ = ["DEFAULT_MAX_WAIT_TIME", "DEFAULT_POLL_INTERVAL", "MutationPoller"]
