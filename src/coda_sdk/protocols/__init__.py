# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for pluggable SDK collaborators.

Available protocols:
- TransportProtocol: Interface for sending HTTP requests

Supporting types:
- TransportResponse: Raw status, headers and body text of a response
"""

from .transport import TransportProtocol, TransportResponse

__all__ = [
    "TransportProtocol",
    "TransportResponse",
]
