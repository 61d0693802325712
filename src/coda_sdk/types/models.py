# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Typed shapes of the remote API's payloads.

These TypedDicts document the JSON bodies exchanged with the API. The client
passes payloads through unchanged; nothing here is validated at runtime.
Only the fields the SDK itself reads are listed as required.
"""

from typing import Any, Generic, Literal, TypeVar, Union

from typing_extensions import NotRequired, TypedDict

T = TypeVar("T")

Primitive = Union[str, int, float, bool, None]
CellValue = Union[Primitive, list[Primitive]]
"""Values accepted in a row cell: a primitive, or a list of primitives."""

ValueFormat = Literal["simple", "simpleWithArrays", "rich"]


class Page(TypedDict, Generic[T]):
    """One page of a paged listing."""

    items: NotRequired[list[T]]
    href: NotRequired[str]
    nextPageToken: NotRequired[str]
    nextPageLink: NotRequired[str]


class Workspace(TypedDict):
    id: str
    type: str
    name: str
    href: str
    organizationId: NotRequired[str]
    description: NotRequired[str]


class User(TypedDict):
    name: str
    loginId: str
    type: str
    scoped: bool
    href: str
    tokenName: NotRequired[str]
    workspace: NotRequired[Workspace]


class Reference(TypedDict):
    id: str
    type: str
    href: str
    browserLink: NotRequired[str]
    name: NotRequired[str]


class Doc(TypedDict):
    id: str
    type: Literal["doc"]
    href: str
    browserLink: str
    name: str
    owner: str
    ownerName: str
    createdAt: str
    updatedAt: str
    workspaceId: NotRequired[str]
    folderId: NotRequired[str]
    folder: NotRequired[Reference]
    workspace: NotRequired[Reference]
    sourceDoc: NotRequired[Reference]
    docSize: NotRequired[dict[str, Any]]


class Table(TypedDict):
    id: str
    type: Literal["table"]
    href: str
    browserLink: str
    name: str
    parent: Reference
    rowCount: int
    layout: str
    createdAt: str
    updatedAt: str
    displayColumn: NotRequired[Reference]
    parentTable: NotRequired[Reference]
    sorts: NotRequired[list[dict[str, Any]]]
    filter: NotRequired[dict[str, Any]]


class Column(TypedDict):
    id: str
    type: Literal["column"]
    href: str
    name: str
    parent: Reference
    format: dict[str, Any]
    calculated: NotRequired[bool]
    formula: NotRequired[str]
    defaultValue: NotRequired[Any]
    display: NotRequired[bool]


class Row(TypedDict):
    id: str
    type: Literal["row"]
    href: str
    name: str
    index: int
    browserLink: str
    createdAt: str
    updatedAt: str
    values: dict[str, Any]
    parent: NotRequired[Reference]


class Cell(TypedDict):
    column: str
    value: CellValue


class RowRequest(TypedDict):
    cells: list[Cell]
    keyColumns: NotRequired[list[str]]


class MutationResponse(TypedDict):
    requestId: str
    addedRowIds: NotRequired[list[str]]
    id: NotRequired[str]


class MutationStatusPayload(TypedDict):
    id: str
    status: Literal["inProgress", "complete", "failed"]
    error: NotRequired[str]
    completedAt: NotRequired[str]


__all__ = [
    "Cell",
    "CellValue",
    "Column",
    "Doc",
    "MutationResponse",
    "MutationStatusPayload",
    "Page",
    "Primitive",
    "Reference",
    "Row",
    "RowRequest",
    "Table",
    "User",
    "ValueFormat",
    "Workspace",
]
