# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Mutation status types.

Writes to the remote API are applied asynchronously. The API answers a write
with a request id, and the outcome is observed by polling the mutation status
endpoint until the mutation reaches a terminal state.

State machine::

    IN_PROGRESS ──▶ COMPLETE   (terminal)
         │
         └────────▶ FAILED     (terminal)
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class MutationStatus(Enum):
    """Status values reported by the mutation status endpoint."""

    IN_PROGRESS = "inProgress"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not MutationStatus.IN_PROGRESS


class MutationHandle(BaseModel):
    """
    Observed state of a submitted mutation.

    Handles are built from status responses; the client never sets a status
    itself. Instances are immutable.

    Attributes:
        request_id: Request id returned by the write call
        status: Last observed status
        error: Server-provided error text when status is FAILED
        completed_at: ISO-8601 completion timestamp, when reported
    """

    model_config = ConfigDict(frozen=True)

    request_id: str
    status: MutationStatus
    error: str | None = None
    completed_at: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _status_from_completed_flag(cls, data: Any) -> Any:
        """Accept the ``{"completed": bool}`` payload shape as well."""
        if isinstance(data, dict) and data.get("status") is None:
            completed = data.get("completed")
            if completed is not None:
                data = dict(data)
                data["status"] = (
                    MutationStatus.COMPLETE if completed else MutationStatus.IN_PROGRESS
                )
        return data

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @classmethod
    def from_response(
        cls, request_id: str, payload: Mapping[str, Any]
    ) -> "MutationHandle":
        """Build a handle from a mutation status response body.

        Raises:
            ValueError: If the payload carries no status or an unknown one
                (pydantic's ValidationError is a ValueError).
        """
        return cls.model_validate(
            {
                "request_id": payload.get("id") or request_id,
                "status": payload.get("status"),
                "completed": payload.get("completed"),
                "error": payload.get("error") or payload.get("warning"),
                "completed_at": payload.get("completedAt"),
            }
        )


__all__ = ["MutationHandle", "MutationStatus"]
