# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Helpers built on CodaClient: pagination, batch writes, search and upsert.
"""

from .batch import DEFAULT_BATCH_SIZE, RowTransform, insert_rows_batch
from .pagination import PageFetcher, get_all_rows, paginate_all
from .rows import (
    METADATA_KEY,
    create_cell,
    create_row,
    export_table_to_json,
    row_to_object,
)
from .search import (
    RowPredicate,
    UpsertResult,
    find_row_by_column_value,
    find_rows,
    upsert_row,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "METADATA_KEY",
    "PageFetcher",
    "RowPredicate",
    "RowTransform",
    "UpsertResult",
    "create_cell",
    "create_row",
    "export_table_to_json",
    "find_row_by_column_value",
    "find_rows",
    "get_all_rows",
    "insert_rows_batch",
    "paginate_all",
    "row_to_object",
    "upsert_row",
]
