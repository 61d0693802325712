# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions for calls, mutations and API payloads."""

from .models import (
    Cell,
    CellValue,
    Column,
    Doc,
    MutationResponse,
    MutationStatusPayload,
    Page,
    Primitive,
    Reference,
    Row,
    RowRequest,
    Table,
    User,
    ValueFormat,
    Workspace,
)
from .mutation import MutationHandle, MutationStatus
from .request import READ_METHODS, CallDescriptor, TrafficClass

__all__ = [
    "READ_METHODS",
    # Request types
    "CallDescriptor",
    # Payload types
    "Cell",
    "CellValue",
    "Column",
    "Doc",
    "MutationHandle",
    "MutationResponse",
    # Mutation types
    "MutationStatus",
    "MutationStatusPayload",
    "Page",
    "Primitive",
    "Reference",
    "Row",
    "RowRequest",
    "Table",
    "TrafficClass",
    "User",
    "ValueFormat",
    "Workspace",
]
