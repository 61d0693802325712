# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Row payload builders and converters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..types.models import Cell, CellValue, Row, RowRequest, ValueFormat
from .pagination import get_all_rows

if TYPE_CHECKING:
    from ..client import CodaClient

METADATA_KEY = "_metadata"


def create_cell(column: str, value: CellValue) -> Cell:
    return {"column": column, "value": value}


def create_row(
    data: Mapping[str, CellValue], key_columns: list[str] | None = None
) -> RowRequest:
    """
    Build a row request from a column -> value mapping.

    Example:
        >>> create_row({"Name": "Ada", "Age": 36})
        {'cells': [{'column': 'Name', 'value': 'Ada'}, {'column': 'Age', 'value': 36}]}
    """
    row: RowRequest = {
        "cells": [create_cell(column, value) for column, value in data.items()]
    }
    if key_columns:
        row["keyColumns"] = list(key_columns)
    return row


def row_to_object(row: Row) -> dict[str, Any]:
    """Return a plain copy of a row's values."""
    return dict(row.get("values") or {})


async def export_table_to_json(
    client: CodaClient,
    doc_id: str,
    table_id: str,
    use_column_names: bool = True,
    include_metadata: bool = False,
    value_format: ValueFormat | None = None,
) -> list[dict[str, Any]]:
    """
    Export every row of a table as plain dicts.

    With ``include_metadata`` each dict also carries a ``_metadata`` entry
    holding the row's id, index, timestamps and browser link.
    """
    rows = await get_all_rows(
        client,
        doc_id,
        table_id,
        use_column_names=use_column_names,
        value_format=value_format,
    )

    exported: list[dict[str, Any]] = []
    for row in rows:
        data = row_to_object(row)
        if include_metadata:
            data[METADATA_KEY] = {
                "id": row.get("id"),
                "index": row.get("index"),
                "createdAt": row.get("createdAt"),
                "updatedAt": row.get("updatedAt"),
                "browserLink": row.get("browserLink"),
            }
        exported.append(data)
    return exported


__all__ = [
    "METADATA_KEY",
    "create_cell",
    "create_row",
    "export_table_to_json",
    "row_to_object",
]
