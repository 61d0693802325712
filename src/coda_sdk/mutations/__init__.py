# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Mutation completion polling."""

from .poller import DEFAULT_MAX_WAIT_TIME, DEFAULT_POLL_INTERVAL, MutationPoller

__all__ = ["DEFAULT_MAX_WAIT_TIME", "DEFAULT_POLL_INTERVAL", "MutationPoller"]
