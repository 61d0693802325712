# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Chunked row insertion."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..exceptions import BatchWriteError
from ..types.models import RowRequest
from ..types.mutation import MutationStatus
from ..validation import DataValidator
from .rows import create_row

if TYPE_CHECKING:
    from ..client import CodaClient

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

RowTransform = Callable[[Mapping[str, Any]], RowRequest]


async def insert_rows_batch(
    client: CodaClient,
    doc_id: str,
    table_id: str,
    records: Sequence[Mapping[str, Any]],
    batch_size: int = DEFAULT_BATCH_SIZE,
    key_columns: list[str] | None = None,
    wait_for_completion: bool = False,
    transform: RowTransform = create_row,
) -> list[str]:
    """
    Insert records in sequential chunks.

    Every record is validated before the first write. Chunks are sent one
    at a time, never concurrently. With ``wait_for_completion`` each chunk's
    mutation is awaited before the next chunk is sent, and a FAILED mutation
    aborts the remaining chunks.

    Args:
        client: Client to write with
        doc_id: Doc id
        table_id: Table id or name
        records: Column -> value mappings
        batch_size: Rows per insert call
        key_columns: Columns that make the insert an upsert on the server
        wait_for_completion: Await each chunk's mutation
        transform: Turns one record into a row request

    Returns:
        Ids of the added rows, in chunk order

    Raises:
        ValidationError: If any record is invalid (nothing is written)
        BatchWriteError: If an awaited chunk mutation reports failure
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    DataValidator.validate_or_raise(list(records))

    added: list[str] = []
    total_batches = (len(records) + batch_size - 1) // batch_size

    for batch_index, offset in enumerate(range(0, len(records), batch_size)):
        chunk = records[offset : offset + batch_size]
        response = await client.insert_rows(
            doc_id,
            table_id,
            [transform(record) for record in chunk],
            key_columns=key_columns,
        )
        request_id = response["requestId"]
        logger.debug(
            f"Batch {batch_index + 1}/{total_batches} submitted "
            f"({len(chunk)} rows, request {request_id})"
        )

        if wait_for_completion:
            handle = await client.wait_for_mutation(request_id)
            if handle.status is MutationStatus.FAILED:
                logger.error(
                    f"Batch {batch_index} (request {request_id}) failed: {handle.error}"
                )
                raise BatchWriteError(batch_index, request_id, handle.error)

        added.extend(response.get("addedRowIds") or [])

    return added


__all__ = ["DEFAULT_BATCH_SIZE", "RowTransform", "insert_rows_batch"]
