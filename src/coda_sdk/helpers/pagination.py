# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Cursor-following iteration over paged listings."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from ..types.models import Page, Row

if TYPE_CHECKING:
    from ..client import CodaClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], Awaitable[Page[T]]]


async def paginate_all(fetcher: PageFetcher[T]) -> AsyncIterator[T]:
    """
    Yield every item of a paged listing, fetching pages on demand.

    The fetcher receives the page token (None for the first page) and
    returns one page. Pages are requested only as the consumer advances, so
    stopping early costs no extra calls. The iterator is forward-only and
    cannot be restarted.

    Example:
        >>> async for row in paginate_all(
        ...     lambda token: client.list_rows(doc_id, table_id, page_token=token)
        ... ):
        ...     print(row["name"])
    """
    page_token: str | None = None
    pages = 0
    while True:
        page = await fetcher(page_token)
        pages += 1
        for item in page.get("items") or []:
            yield item
        page_token = page.get("nextPageToken")
        if not page_token:
            logger.debug(f"Pagination finished after {pages} pages")
            return


async def get_all_rows(
    client: CodaClient, doc_id: str, table_id: str, **params: Any
) -> list[Row]:
    """
    Fetch every row of a table.

    Args:
        client: Client to list rows with
        doc_id: Doc id
        table_id: Table id or name
        **params: Extra ``list_rows`` keyword arguments (``use_column_names``,
            ``value_format``, ``visible_only``, ``query``, ...)
    """
    params.pop("page_token", None)
    return [
        row
        async for row in paginate_all(
            lambda token: client.list_rows(doc_id, table_id, page_token=token, **params)
        )
    ]


__all__ = ["PageFetcher", "get_all_rows", "paginate_all"]
