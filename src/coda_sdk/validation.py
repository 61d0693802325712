# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Client-side checks for row payloads.

Cell values form a closed set: str, int, float, bool, None, or a list/tuple
of those. Mappings and any other object are rejected before they reach the
API.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def is_cell_value(value: Any) -> bool:
    """True for a primitive or a flat list/tuple of primitives."""
    if isinstance(value, _PRIMITIVE_TYPES):
        return True
    if isinstance(value, (list, tuple)):
        return all(isinstance(v, _PRIMITIVE_TYPES) for v in value)
    return False


class DataValidator:
    """Validates row data before it is written."""

    @staticmethod
    def validate_row_data(data: Mapping[Any, Any]) -> list[str]:
        """
        Check one record mapping column names to cell values.

        Returns:
            One message per problem, in column order; empty when valid
        """
        errors: list[str] = []
        for key, value in data.items():
            if not isinstance(key, str) or not key.strip():
                errors.append(f'Name of column "{key}" is invalid')
            if not is_cell_value(value):
                errors.append(f'Unsupported value type for column "{key}"')
        return errors

    @classmethod
    def validate_records(cls, records: list[Mapping[Any, Any]]) -> list[str]:
        """Validate many records; messages are prefixed with the record index."""
        errors: list[str] = []
        for index, record in enumerate(records):
            errors.extend(
                f"Record {index}: {message}"
                for message in cls.validate_row_data(record)
            )
        return errors

    @classmethod
    def validate_or_raise(cls, records: list[Mapping[Any, Any]]) -> None:
        """
        Raises:
            ValidationError: If any record is invalid
        """
        errors = cls.validate_records(records)
        if errors:
            logger.debug(f"Row validation failed with {len(errors)} errors")
            raise ValidationError(errors)


__all__ = ["DataValidator", "is_cell_value"]
