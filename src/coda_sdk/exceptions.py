# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the Coda SDK.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from CodaError. Faults reported by (or on the way to)
the remote API inherit from CodaApiError, which carries the HTTP status code
when one is known and any structured details returned by the server.

Retry classification used by the request engine:

- Never retried: UnauthorizedError, ForbiddenError, InvalidRequestError,
  NotFoundError, RateLimitedError
- Retried up to ``max_retries``: ServerError, NetworkError, RequestTimeoutError
"""

from typing import Any


class CodaError(Exception):
    """Base exception for all Coda SDK errors.

    Catch this exception to handle any error originating from the library.

    Example:
        try:
            await client.list_docs()
        except CodaError as e:
            logger.error(f"Coda SDK error: {e}")
    """

    pass


class ConfigurationError(CodaError):
    """Raised when a client cannot be built from the given configuration.

    Common causes include an unknown profile name or a transport object that
    does not implement TransportProtocol.
    """

    pass


class CodaApiError(CodaError):
    """Raised when a call to the remote API fails.

    Attributes:
        status_code: HTTP status of the failed response, or None when no
            response was received (connection failures).
        details: Structured error payload parsed from the response body,
            or None when the body was empty or not JSON.

    Example:
        try:
            row = await client.get_row(doc_id, table_id, row_id)
        except CodaApiError as e:
            if e.status_code == 404:
                row = None
            else:
                raise
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    @property
    def retryable(self) -> bool:
        """Whether the request engine may retry after this error."""
        return False


class UnauthorizedError(CodaApiError):
    """Raised on HTTP 401, or when no usable API token can be resolved."""

    def __init__(self, message: str = "Unauthorized", details: Any | None = None):
        super().__init__(message, 401, details)


class ForbiddenError(CodaApiError):
    """Raised on HTTP 403: the token is valid but lacks access."""

    def __init__(self, message: str = "Forbidden", details: Any | None = None):
        super().__init__(message, 403, details)


class InvalidRequestError(CodaApiError):
    """Raised on HTTP 400 and 422: the request itself was rejected."""

    def __init__(
        self,
        message: str = "Invalid request",
        status_code: int = 400,
        details: Any | None = None,
    ):
        super().__init__(message, status_code, details)


class NotFoundError(CodaApiError):
    """Raised on HTTP 404."""

    def __init__(self, message: str = "Not found", details: Any | None = None):
        super().__init__(message, 404, details)


class RateLimitedError(CodaApiError):
    """Raised on HTTP 429.

    The request engine surfaces this error immediately instead of retrying:
    the client-side limiter should already have throttled the caller, so a
    second encounter signals that the caller must slow down.

    Attributes:
        retry_after: Seconds the server asked the caller to wait, taken from
            the ``retry-after`` response header (60 when absent).

    Example:
        try:
            await client.insert_rows(doc_id, table_id, rows)
        except RateLimitedError as e:
            await asyncio.sleep(e.retry_after)
            await client.insert_rows(doc_id, table_id, rows)
    """

    def __init__(self, retry_after: float = 60.0, details: Any | None = None):
        super().__init__(
            f"Rate limit exceeded, retry after {retry_after:g}s", 429, details
        )
        self.retry_after = retry_after


class ServerError(CodaApiError):
    """Raised on 5xx and any other unexpected non-success status."""

    @property
    def retryable(self) -> bool:
        return True


class NetworkError(CodaApiError):
    """Raised by transports when no response could be obtained."""

    def __init__(self, message: str = "Network error", details: Any | None = None):
        super().__init__(message, None, details)

    @property
    def retryable(self) -> bool:
        return True


class RequestTimeoutError(CodaApiError):
    """Raised when a deadline passes before the awaited result arrives.

    Raised by transports when a single attempt exceeds the configured
    timeout, and by the mutation poller when ``max_wait_time`` elapses before
    the mutation reaches a terminal state.

    Attributes:
        timeout: The deadline that was exceeded, in seconds.
    """

    def __init__(
        self, message: str = "Request timed out", timeout: float | None = None
    ):
        super().__init__(message, 408)
        self.timeout = timeout

    @property
    def retryable(self) -> bool:
        return True


class ValidationError(CodaApiError):
    """Raised when row data fails client-side validation.

    Attributes:
        validation_errors: One human-readable message per problem found.

    Example:
        try:
            await insert_rows_batch(client, doc_id, table_id, records)
        except ValidationError as e:
            for problem in e.validation_errors:
                logger.warning(problem)
    """

    def __init__(self, validation_errors: list[str]):
        super().__init__("Validation failed", 400, {"errors": validation_errors})
        self.validation_errors = validation_errors


class BatchWriteError(CodaError):
    """Raised when an awaited batch mutation reports failure.

    The batch is aborted: chunks after the failing one are not sent.

    Attributes:
        batch_index: Zero-based index of the failing chunk.
        request_id: Mutation request id of the failing chunk.
        server_error: Error text reported by the mutation status endpoint.
    """

    def __init__(
        self,
        batch_index: int,
        request_id: str,
        server_error: str | None = None,
    ):
        super().__init__(
            f"Batch {batch_index} (request {request_id}) failed: "
            f"{server_error or 'unknown error'}"
        )
        self.batch_index = batch_index
        self.request_id = request_id
        self.server_error = server_error
