# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Row search and upsert."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from contextlib import aclosing
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from ..types.models import Row
from ..types.mutation import MutationHandle
from .pagination import paginate_all
from .rows import create_row, row_to_object

if TYPE_CHECKING:
    from ..client import CodaClient

logger = logging.getLogger(__name__)

RowPredicate = Callable[[Row], bool]


@dataclass(frozen=True)
class UpsertResult:
    """
    Outcome of ``upsert_row``.

    Attributes:
        action: ``"updated"`` when an existing row matched, else ``"inserted"``
        row_id: Id of the updated row, or of the inserted row when the
            server reported it
        request_id: Mutation request id of the write
        mutation: Terminal mutation state, when completion was awaited
    """

    action: Literal["inserted", "updated"]
    row_id: str | None
    request_id: str
    mutation: MutationHandle | None = None


async def find_rows(
    client: CodaClient,
    doc_id: str,
    table_id: str,
    predicate: RowPredicate,
    limit: int | None = 1,
    **params: Any,
) -> list[Row]:
    """
    Return rows matching ``predicate``, stopping once ``limit`` are found.

    Pages are fetched lazily, so no page past the one holding the last
    needed match is requested. ``limit=None`` scans the whole table.

    Args:
        **params: Extra ``list_rows`` keyword arguments
    """
    if limit is not None and limit < 1:
        raise ValueError("limit must be at least 1")

    params.pop("page_token", None)
    matches: list[Row] = []
    rows = paginate_all(
        lambda token: client.list_rows(doc_id, table_id, page_token=token, **params)
    )
    async with aclosing(rows):
        async for row in rows:
            if predicate(row):
                matches.append(row)
                if limit is not None and len(matches) >= limit:
                    break
    return matches


async def find_row_by_column_value(
    client: CodaClient,
    doc_id: str,
    table_id: str,
    column: str,
    value: Any,
    **params: Any,
) -> Row | None:
    """
    Return the first row whose ``column`` equals ``value``, or None.

    Row values are requested keyed by column name unless the caller passes
    ``use_column_names=False`` (then ``column`` must be a column id).
    """
    params.setdefault("use_column_names", True)
    rows = await find_rows(
        client,
        doc_id,
        table_id,
        lambda row: row_to_object(row).get(column) == value,
        limit=1,
        **params,
    )
    return rows[0] if rows else None


async def upsert_row(
    client: CodaClient,
    doc_id: str,
    table_id: str,
    data: Mapping[str, Any],
    key_column: str,
    wait_for_completion: bool = False,
) -> UpsertResult:
    """
    Update the row whose ``key_column`` matches ``data``, or insert one.

    Args:
        data: Column name -> value mapping; must contain ``key_column``
        key_column: Column name identifying the row
        wait_for_completion: Await the write's mutation before returning

    Raises:
        ValueError: If ``data`` has no value for ``key_column``
    """
    if key_column not in data:
        raise ValueError(f"data has no value for key column {key_column!r}")

    existing = await find_row_by_column_value(
        client, doc_id, table_id, key_column, data[key_column]
    )

    if existing is not None:
        response = await client.update_row(
            doc_id, table_id, existing["id"], create_row(data)
        )
        action: Literal["inserted", "updated"] = "updated"
        row_id: str | None = existing["id"]
    else:
        response = await client.insert_rows(
            doc_id, table_id, [create_row(data)], key_columns=[key_column]
        )
        action = "inserted"
        added = response.get("addedRowIds") or []
        row_id = added[0] if added else None

    request_id = response["requestId"]
    logger.debug(f"Upsert on {key_column}={data[key_column]!r}: {action} {row_id}")

    mutation = None
    if wait_for_completion:
        mutation = await client.wait_for_mutation(request_id)

    return UpsertResult(
        action=action, row_id=row_id, request_id=request_id, mutation=mutation
    )


__all__ = [
    "RowPredicate",
    "UpsertResult",
    "find_row_by_column_value",
    "find_rows",
    "upsert_row",
]
