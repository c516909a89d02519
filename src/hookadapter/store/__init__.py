"""Durable execution log shared by hook processes."""

from hookadapter.store.execution_log import (
    DEFAULT_DEBOUNCE_MS,
    REVIEW_OPERATION,
    ExecutionLogStore,
)

__all__ = ["DEFAULT_DEBOUNCE_MS", "REVIEW_OPERATION", "ExecutionLogStore"]
