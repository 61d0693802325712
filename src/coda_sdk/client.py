# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Async client for the Coda REST API.

CodaClient maps each API endpoint onto a CallDescriptor and runs it through
a RequestEngine, so every call gets the same rate limiting, caching, retry
and metrics treatment.

Usage:
    async with CodaClient(ClientConfig(api_token=token)) as client:
        me = await client.whoami()
        page = await client.list_rows(doc_id, table_id, use_column_names=True)

Successful writes evict cached reads of the resource they changed: row
writes evict the table's cached reads, doc writes evict cached doc reads.
"""

from __future__ import annotations

import logging
from typing import Any, cast
from urllib.parse import quote

from .config.credentials import EnvironmentTokenSource, resolve_api_token
from .config.settings import ClientConfig, configure_logging
from .engine.request_engine import RequestEngine
from .exceptions import ConfigurationError
from .mutations.poller import (
    DEFAULT_MAX_WAIT_TIME,
    DEFAULT_POLL_INTERVAL,
    MutationPoller,
)
from .observability.metrics import MetricsCollector
from .protocols.transport import TransportProtocol
from .transport.httpx_transport import HttpxTransport
from .types.models import (
    Column,
    Doc,
    MutationResponse,
    Page,
    Row,
    RowRequest,
    Table,
    User,
    ValueFormat,
)
from .types.mutation import MutationHandle
from .types.request import CallDescriptor

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    """Percent-encode one path segment (table names may contain spaces)."""
    return quote(value, safe="")


def _doc_path(doc_id: str) -> str:
    return f"/docs/{_segment(doc_id)}"


def _table_path(doc_id: str, table_id: str) -> str:
    return f"{_doc_path(doc_id)}/tables/{_segment(table_id)}"


class CodaClient:
    """
    Typed endpoint methods over a RequestEngine.

    The API token is resolved once, at construction: ``config.api_token``
    first, then CODA_API_TOKEN and CODA_TOKEN from ``token_source`` (the
    process environment by default).

    Raises:
        UnauthorizedError: If no well-formed token can be resolved
        ConfigurationError: If ``transport`` does not implement
            TransportProtocol
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: TransportProtocol | None = None,
        token_source: EnvironmentTokenSource | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        configure_logging(self.config.log_level)

        token = resolve_api_token(self.config.api_token, token_source)

        if transport is None:
            transport = HttpxTransport(timeout=self.config.timeout)
            self._owns_transport = True
        elif isinstance(transport, TransportProtocol):
            self._owns_transport = False
        else:
            raise ConfigurationError(
                f"{type(transport).__name__} does not implement TransportProtocol"
            )

        self.engine = RequestEngine.from_config(self.config, token, transport)
        self.poller = MutationPoller(self.engine)

        logger.debug(
            f"CodaClient initialized: base_url={self.config.base_url}, "
            f"cache={self.config.enable_cache}, "
            f"rate_limit={self.config.enable_rate_limit}, "
            f"metrics={self.config.enable_metrics}"
        )

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self.engine.execute(CallDescriptor(endpoint, params=params))

    async def _write(self, endpoint: str, method: str, body: Any = None) -> Any:
        return await self.engine.execute(CallDescriptor(endpoint, method, body=body))

    def _invalidate_prefix(self, path: str) -> None:
        cache = self.engine.cache
        if cache is None:
            return
        key = f"GET {path}"
        cache.delete(key)
        cache.invalidate(f"{key}/")
        cache.invalidate(f"{key}?")

    # === Account ===

    async def whoami(self) -> User:
        """Return the user owning the API token."""
        return cast(User, await self._get("/whoami"))

    # === Docs ===

    async def list_docs(
        self,
        *,
        is_owner: bool | None = None,
        is_published: bool | None = None,
        query: str | None = None,
        source_doc: str | None = None,
        is_starred: bool | None = None,
        in_gallery: bool | None = None,
        workspace_id: str | None = None,
        folder_id: str | None = None,
        limit: int | None = None,
        page_token: str | None = None,
    ) -> Page[Doc]:
        params = {
            "isOwner": is_owner,
            "isPublished": is_published,
            "query": query,
            "sourceDoc": source_doc,
            "isStarred": is_starred,
            "inGallery": in_gallery,
            "workspaceId": workspace_id,
            "folderId": folder_id,
            "limit": limit,
            "pageToken": page_token,
        }
        return cast(Page[Doc], await self._get("/docs", params))

    async def get_doc(self, doc_id: str) -> Doc:
        return cast(Doc, await self._get(_doc_path(doc_id)))

    async def create_doc(
        self,
        name: str,
        *,
        source_doc: str | None = None,
        timezone: str | None = None,
        folder_id: str | None = None,
        initial_page: dict[str, Any] | None = None,
    ) -> Doc:
        """Create a doc, optionally copying ``source_doc``."""
        body: dict[str, Any] = {"title": name}
        for key, value in (
            ("sourceDoc", source_doc),
            ("timezone", timezone),
            ("folderId", folder_id),
            ("initialPage", initial_page),
        ):
            if value is not None:
                body[key] = value
        doc = await self._write("/docs", "POST", body)
        self._invalidate_prefix("/docs")
        return cast(Doc, doc)

    async def delete_doc(self, doc_id: str) -> MutationResponse:
        response = await self._write(_doc_path(doc_id), "DELETE")
        self._invalidate_prefix("/docs")
        return cast(MutationResponse, response)

    # === Tables and columns ===

    async def list_tables(
        self,
        doc_id: str,
        *,
        table_types: list[str] | None = None,
        sort_by: str | None = None,
        limit: int | None = None,
        page_token: str | None = None,
    ) -> Page[Table]:
        params = {
            "tableTypes": table_types,
            "sortBy": sort_by,
            "limit": limit,
            "pageToken": page_token,
        }
        return cast(Page[Table], await self._get(f"{_doc_path(doc_id)}/tables", params))

    async def get_table(self, doc_id: str, table_id: str) -> Table:
        return cast(Table, await self._get(_table_path(doc_id, table_id)))

    async def list_columns(
        self,
        doc_id: str,
        table_id: str,
        *,
        visible_only: bool | None = None,
        limit: int | None = None,
        page_token: str | None = None,
    ) -> Page[Column]:
        params = {"visibleOnly": visible_only, "limit": limit, "pageToken": page_token}
        return cast(
            Page[Column],
            await self._get(f"{_table_path(doc_id, table_id)}/columns", params),
        )

    async def get_column(self, doc_id: str, table_id: str, column_id: str) -> Column:
        endpoint = f"{_table_path(doc_id, table_id)}/columns/{_segment(column_id)}"
        return cast(Column, await self._get(endpoint))

    # === Rows ===

    async def list_rows(
        self,
        doc_id: str,
        table_id: str,
        *,
        query: str | None = None,
        sort_by: str | None = None,
        use_column_names: bool | None = None,
        value_format: ValueFormat | None = None,
        visible_only: bool | None = None,
        limit: int | None = None,
        page_token: str | None = None,
        sync_token: str | None = None,
    ) -> Page[Row]:
        """
        List one page of rows.

        ``query`` filters on a column value using the API's
        ``<column>:<json value>`` syntax.
        """
        params = {
            "query": query,
            "sortBy": sort_by,
            "useColumnNames": use_column_names,
            "valueFormat": value_format,
            "visibleOnly": visible_only,
            "limit": limit,
            "pageToken": page_token,
            "syncToken": sync_token,
        }
        return cast(
            Page[Row], await self._get(f"{_table_path(doc_id, table_id)}/rows", params)
        )

    async def get_row(
        self,
        doc_id: str,
        table_id: str,
        row_id: str,
        *,
        use_column_names: bool | None = None,
        value_format: ValueFormat | None = None,
    ) -> Row:
        endpoint = f"{_table_path(doc_id, table_id)}/rows/{_segment(row_id)}"
        params = {"useColumnNames": use_column_names, "valueFormat": value_format}
        return cast(Row, await self._get(endpoint, params))

    async def insert_rows(
        self,
        doc_id: str,
        table_id: str,
        rows: list[RowRequest],
        *,
        key_columns: list[str] | None = None,
        disable_parsing: bool | None = None,
    ) -> MutationResponse:
        """
        Insert rows, or upsert them on ``key_columns``.

        The write is applied asynchronously; pass the returned ``requestId``
        to ``wait_for_mutation`` to observe completion.
        """
        body: dict[str, Any] = {"rows": rows}
        if key_columns:
            body["keyColumns"] = key_columns
        if disable_parsing is not None:
            body["disableParsing"] = disable_parsing
        endpoint = f"{_table_path(doc_id, table_id)}/rows"
        response = await self._write(endpoint, "POST", body)
        self._invalidate_prefix(_table_path(doc_id, table_id))
        return cast(MutationResponse, response)

    async def update_row(
        self,
        doc_id: str,
        table_id: str,
        row_id: str,
        row: RowRequest,
        *,
        disable_parsing: bool | None = None,
    ) -> MutationResponse:
        body: dict[str, Any] = {"row": row}
        if disable_parsing is not None:
            body["disableParsing"] = disable_parsing
        endpoint = f"{_table_path(doc_id, table_id)}/rows/{_segment(row_id)}"
        response = await self._write(endpoint, "PUT", body)
        self._invalidate_prefix(_table_path(doc_id, table_id))
        return cast(MutationResponse, response)

    async def delete_row(
        self, doc_id: str, table_id: str, row_id: str
    ) -> MutationResponse:
        endpoint = f"{_table_path(doc_id, table_id)}/rows/{_segment(row_id)}"
        response = await self._write(endpoint, "DELETE")
        self._invalidate_prefix(_table_path(doc_id, table_id))
        return cast(MutationResponse, response)

    async def delete_rows(
        self, doc_id: str, table_id: str, row_ids: list[str]
    ) -> MutationResponse:
        response = await self._write(
            f"{_table_path(doc_id, table_id)}/rows", "DELETE", {"rowIds": row_ids}
        )
        self._invalidate_prefix(_table_path(doc_id, table_id))
        return cast(MutationResponse, response)

    # === Mutations ===

    async def get_mutation_status(self, request_id: str) -> MutationHandle:
        return await self.poller.get_status(request_id)

    async def wait_for_mutation(
        self,
        request_id: str,
        max_wait_time: float = DEFAULT_MAX_WAIT_TIME,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> MutationHandle:
        """See ``MutationPoller.wait_for_mutation``."""
        return await self.poller.wait_for_mutation(
            request_id, max_wait_time=max_wait_time, poll_interval=poll_interval
        )

    # === Governance ===

    def get_stats(self) -> dict[str, dict[str, Any] | None]:
        """Stats of the metrics, cache and rate limiter (None when disabled)."""
        return self.engine.get_stats()

    def clear_cache(self) -> None:
        if self.engine.cache is not None:
            self.engine.cache.clear()

    def reset_metrics(self) -> None:
        metrics = self.engine.metrics
        if isinstance(metrics, MetricsCollector):
            metrics.reset()

    async def aclose(self) -> None:
        """Close the transport if the client created it."""
        if self._owns_transport:
            await self.engine.transport.aclose()

    async def __aenter__(self) -> CodaClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["CodaClient"]
